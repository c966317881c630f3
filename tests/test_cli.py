"""Tests for the ``calc`` command."""

import math

from calcexpr.cli import main, parse_options


class TestParseOptions:
    def test_pairs(self):
        assert parse_options(["-n", "16", "-pi", "3.141"]) == {"n": 16.0, "pi": 3.141}

    def test_text_and_bool(self):
        assert parse_options(["-host", "srv", "-on", "true", "-off", "false"]) == {
            "host": "srv",
            "on": True,
            "off": False,
        }

    def test_flag_without_value(self):
        assert parse_options(["-verbose", "-n", "1"]) == {"verbose": True, "n": 1.0}

    def test_trailing_flag(self):
        assert parse_options(["-n", "1", "-verbose"]) == {"n": 1.0, "verbose": True}

    def test_masked_negative_value(self):
        assert parse_options(["-offset", "\\-3"]) == {"offset": -3.0}

    def test_stray_value_is_skipped(self):
        assert parse_options(["stray", "-n", "2"]) == {"n": 2.0}

    def test_integer_beyond_float_range(self):
        assert parse_options(["-n", "9" * 400]) == {"n": math.inf}

    def test_double_dash_key(self):
        assert parse_options(["--n", "2"]) == {"n": 2.0}


class TestMain:
    def test_sprintf(self, capsys):
        code = main(["-n", "16", "-text", "Shell calculator result:", "-pi", "3.141",
                     'sprintf("%s %.3f",text,pi*n)'])
        assert code == 0
        assert capsys.readouterr().out == "Shell calculator result: 50.256\n"

    def test_plain_expression(self, capsys):
        assert main(["1 + 2"]) == 0
        assert capsys.readouterr().out == "3\n"

    def test_float_variables(self, capsys):
        assert main(["-n", "16", "n / 4"]) == 0
        assert capsys.readouterr().out == "4\n"

    def test_nan_result(self, capsys):
        assert main(["sqrt(-1)"]) == 0
        assert capsys.readouterr().out == "NaN\n"

    def test_set_val_prints_nothing(self, capsys):
        assert main(['setVal("a", 1)']) == 0
        assert capsys.readouterr().out == ""

    def test_parse_error(self, capsys):
        assert main(["1 +"]) == 1
        assert capsys.readouterr().out == ""

    def test_no_arguments(self):
        assert main([]) == 2
