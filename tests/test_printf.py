"""Tests for calcexpr.printf."""

import math

import pytest

from calcexpr import VBool, VFloat, VInt, VText
from calcexpr.printf import shortest_g, sprintf


class TestVerbs:
    def test_mixed(self):
        args = [VText("srv.demo.at"), VInt(-15), VFloat(3.141), VBool(True)]
        assert sprintf("%s,%d,%.3f,%t", args) == "srv.demo.at,-15,3.141,true"

    def test_hex(self):
        assert sprintf("%x", [VInt(255)]) == "ff"
        assert sprintf("%X", [VInt(255)]) == "FF"
        assert sprintf("%#x", [VInt(255)]) == "0xff"

    def test_octal_and_binary(self):
        assert sprintf("%o", [VInt(8)]) == "10"
        assert sprintf("%b", [VInt(5)]) == "101"

    def test_width_and_flags(self):
        args = [VFloat(3.14159), VInt(7), VInt(5)]
        assert sprintf("%5.1f|%-4d|%03d", args) == "  3.1|7   |005"

    def test_v(self):
        assert sprintf("%v %v %v %v", [VFloat(1.5), VInt(2), VBool(True), VText("s")]) == "1.5 2 true s"

    def test_g_shortest(self):
        assert sprintf("%g", [VFloat(3.14159265)]) == "3.14159265"

    def test_string_precision(self):
        assert sprintf("%.3s", [VText("abcdef")]) == "abc"

    def test_quoted(self):
        assert sprintf("%q", [VText('a"b')]) == '"a\\"b"'

    def test_percent(self):
        assert sprintf("100%%", []) == "100%"

    def test_nan(self):
        assert sprintf("%f", [VFloat(math.nan)]) == "NaN"
        assert sprintf("%f", [VFloat(math.inf)]) == "+Inf"


class TestErrors:
    def test_missing(self):
        assert sprintf("%d %d", [VInt(1)]) == "1 %!d(MISSING)"

    def test_wrong_type(self):
        assert sprintf("%d", [VText("x")]) == "%!d(string=x)"
        assert sprintf("%s", [VInt(5)]) == "%!s(int=5)"
        assert sprintf("%t", [VFloat(2.5)]) == "%!t(float64=2.5)"

    def test_extra(self):
        assert sprintf("a", [VText("b")]) == "a%!(EXTRA string=b)"
        assert sprintf("a", [VInt(1), VBool(False)]) == "a%!(EXTRA int=1, bool=false)"


class TestShortestG:
    @pytest.mark.parametrize(
        "f, expected",
        [
            (45239.0, "45239"),
            (3.141, "3.141"),
            (1e6, "1e+06"),
            (123456789.0, "1.23456789e+08"),
            (0.0001, "0.0001"),
            (0.00001, "1e-05"),
            (0.0, "0"),
            (-2.5, "-2.5"),
        ],
    )
    def test_format(self, f, expected):
        assert shortest_g(f) == expected
