"""Tests for CalcRepl and the calc-repl line handling."""

import io

import pytest

from calcexpr import CalcRepl, ParseError, VInt
from calcexpr.repl import _fmt_inline, _process_line
from calcexpr.values import VBool, VFloat, VText


class TestCalcRepl:
    def test_variables_persist(self):
        repl = CalcRepl()
        assert repl.eval('setVal("n", 10)') is None
        assert repl.eval("n * 2") == VInt(20)
        assert repl.variables == {"n": VInt(10)}

    def test_reset(self):
        repl = CalcRepl()
        repl.eval('setVal("n", 10)')
        repl.reset()
        assert repl.variables == {}

    def test_parse_error_raises(self):
        with pytest.raises(ParseError):
            CalcRepl().eval("(1")


class TestFmtInline:
    def test_text_is_quoted(self):
        assert _fmt_inline(VText("abc")) == '"abc"'

    def test_other_values(self):
        assert _fmt_inline(VInt(3)) == "3"
        assert _fmt_inline(VFloat(2.5)) == "2.5"
        assert _fmt_inline(VBool(True)) == "true"


class TestProcessLine:
    def run(self, repl, line):
        out = io.StringIO()
        keep_going = _process_line(repl, line, out)
        return keep_going, out.getvalue()

    def test_expression(self):
        assert self.run(CalcRepl(), "1 + 2") == (True, "3\n")

    def test_blank_line(self):
        assert self.run(CalcRepl(), "   ") == (True, "")

    @pytest.mark.parametrize("line", [":q", ":quit"])
    def test_quit(self, line):
        assert self.run(CalcRepl(), line) == (False, "")

    def test_set_val_prints_nothing(self):
        assert self.run(CalcRepl(), 'setVal("a", 1)') == (True, "")

    def test_vars(self):
        repl = CalcRepl()
        self.run(repl, 'setVal("b", "x", "abc", 2)')
        _, out = self.run(repl, ":vars")
        assert out == '  abc : 2\n  b   : "x"\n'

    def test_vars_empty(self):
        _, out = self.run(CalcRepl(), ":vars")
        assert "(no variables defined)" in out

    def test_reset(self):
        repl = CalcRepl()
        self.run(repl, 'setVal("a", 1)')
        self.run(repl, ":reset")
        assert repl.variables == {}

    def test_parse_error_keeps_session(self, capsys):
        repl = CalcRepl()
        assert self.run(repl, "1 +") == (True, "")
        assert "Error:" in capsys.readouterr().err

    def test_batch_file(self, tmp_path):
        script = tmp_path / "calc.txt"
        script.write_text('setVal("r", 2)\n\nr * r\n', encoding="utf-8")
        assert self.run(CalcRepl(), f"?<< {script}") == (True, "4\n")

    def test_batch_file_quit(self, tmp_path):
        script = tmp_path / "calc.txt"
        script.write_text("1\n:q\n2\n", encoding="utf-8")
        assert self.run(CalcRepl(), f"?<< {script}") == (False, "1\n")

    def test_missing_batch_file(self, tmp_path, capsys):
        assert self.run(CalcRepl(), f"?<< {tmp_path / 'missing.txt'}") == (True, "")
        assert "Error reading" in capsys.readouterr().err
