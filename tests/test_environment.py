"""Tests for calcexpr.environment."""

from calcexpr import Environment, VBool, VFloat, VInt, VText


class TestEnvironment:
    def test_roundtrip(self):
        env = Environment()
        env.set("x", VInt(10))
        assert env.get("x") == VInt(10)

    def test_undefined_returns_none(self):
        assert Environment().get("nope") is None

    def test_overwrite(self):
        env = Environment()
        env.set("x", VInt(10))
        env.set("x", VText("ten"))
        assert env.get("x") == VText("ten")

    def test_from_mapping_converts_host_values(self):
        env = Environment.from_mapping({"b": True, "i": 2, "f": 0.5, "s": "str"})
        assert env.get("b") == VBool(True)
        assert env.get("i") == VInt(2)
        assert env.get("f") == VFloat(0.5)
        assert env.get("s") == VText("str")

    def test_from_none(self):
        assert len(Environment.from_mapping(None)) == 0

    def test_container_protocol(self):
        env = Environment.from_mapping({"a": 1, "b": 2})
        assert "a" in env
        assert "c" not in env
        assert sorted(env) == ["a", "b"]
        assert len(env) == 2
