from __future__ import annotations

import logging
from typing import Any

import pytest

from lib_config_template.domain.accessor import ConfigAccessor

DATA = {
    "test": {
        "string": "test",
        "int": 123,
        "long": 9876543210,
        "boolean": True,
        "float": 3.14,
        "double": 3.14159,
        "numeric_string": "42",
        "float_string": "2.5",
        "bool_string": "TRUE",
        "garbage": "not-a-number",
        "list": ["a", 1, "b", None],
        "int_list": ["1", "x", 3, 4.7, True],
        "long_list": [10000000000, "20000000000", "nope"],
        "double_list": ["1.5", 2, "nope", False],
        "map_int": {"a": "1", "b": "x", "c": 2, 3: 4},
        "map_string": {"a": "x", "b": 2},
        "map_double": {"a": "1.5", "b": 2, "c": []},
        "empty_list": [],
    },
    "a": {"b": {"c": "v"}},
}


class RecordingSink:
    """Collects ``(key, target, default)`` triples instead of logging them."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any]] = []

    def __call__(self, key: str, target: str, default: Any) -> None:
        self.calls.append((key, target, default))


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def cfg(sink: RecordingSink) -> ConfigAccessor:
    return ConfigAccessor(DATA, sink)


def test_native_scalars_pass_through(cfg: ConfigAccessor) -> None:
    assert cfg.get_string("test.string", "default") == "test"
    assert cfg.get_int("test.int", 0) == 123
    assert cfg.get_long("test.long", 0) == 9876543210
    assert cfg.get_boolean("test.boolean", False) is True
    assert cfg.get_float("test.float", 0.0) == pytest.approx(3.14)
    assert cfg.get_double("test.double", 0.0) == pytest.approx(3.14159)


def test_strings_are_parsed(cfg: ConfigAccessor, sink: RecordingSink) -> None:
    assert cfg.get_int("test.numeric_string", 0) == 42
    assert cfg.get_long("test.numeric_string", 0) == 42
    assert cfg.get_double("test.float_string", 0.0) == 2.5
    assert cfg.get_boolean("test.bool_string", False) is True
    assert sink.calls == []


def test_native_numbers_are_converted(cfg: ConfigAccessor) -> None:
    assert cfg.get_int("test.float", 0) == 3
    assert cfg.get_double("test.int", 0.0) == 123.0


def test_missing_path_returns_default_silently(cfg: ConfigAccessor, sink: RecordingSink) -> None:
    assert cfg.get_int("missing.path", 42) == 42
    assert cfg.get_string("test.string.deeper", "x") == "x"
    assert sink.calls == []


def test_type_mismatch_returns_default_silently(cfg: ConfigAccessor, sink: RecordingSink) -> None:
    assert cfg.get_string("test.int", "fallback") == "fallback"
    assert cfg.get_int("test.list", 7) == 7
    assert cfg.get_boolean("test.int", False) is False
    assert sink.calls == []


def test_booleans_are_not_numbers(cfg: ConfigAccessor, sink: RecordingSink) -> None:
    assert cfg.get_int("test.boolean", -1) == -1
    assert cfg.get_double("test.boolean", -1.0) == -1.0
    assert sink.calls == []


def test_parse_failure_reports_key_and_default(cfg: ConfigAccessor, sink: RecordingSink) -> None:
    assert cfg.get_int("test.garbage", 5) == 5
    assert cfg.get_double("test.garbage", 1.5) == 1.5
    assert cfg.get_boolean("test.garbage", True) is True
    assert sink.calls == [
        ("test.garbage", "int", 5),
        ("test.garbage", "double", 1.5),
        ("test.garbage", "boolean", True),
    ]


def test_int_range_overflow_falls_back_with_diagnostic(cfg: ConfigAccessor, sink: RecordingSink) -> None:
    assert cfg.get_int("test.long", 0) == 0
    assert sink.calls == [("test.long", "int", 0)]


def test_decimal_string_is_not_an_int(cfg: ConfigAccessor, sink: RecordingSink) -> None:
    assert cfg.get_int("test.float_string", 9) == 9
    assert sink.calls == [("test.float_string", "int", 9)]


def test_default_sink_logs_two_warnings(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="lib_config_template")
    cfg = ConfigAccessor({"port": "eighty"})
    assert cfg.get_int("port", 80) == 80
    messages = [record.getMessage() for record in caplog.records]
    assert messages == ["coercion_failed", "coercion_default_used"]
    assert getattr(caplog.records[0], "context")["key"] == "port"
    assert getattr(caplog.records[1], "context")["default"] == 80


def test_string_list_keeps_strings_only(cfg: ConfigAccessor) -> None:
    assert cfg.get_string_list("test.list", []) == ["a", "b"]


def test_int_list_drops_unparsable_elements(cfg: ConfigAccessor, sink: RecordingSink) -> None:
    assert cfg.get_int_list("test.int_list", [99]) == [1, 3, 4]
    assert sink.calls == []


def test_long_and_double_lists(cfg: ConfigAccessor) -> None:
    assert cfg.get_long_list("test.long_list", []) == [10000000000, 20000000000]
    assert cfg.get_int_list("test.long_list", [1]) == []
    assert cfg.get_double_list("test.double_list", []) == [1.5, 2.0]


def test_list_getters_need_a_sequence(cfg: ConfigAccessor) -> None:
    default = [1]
    assert cfg.get_int_list("test.int", default) is default
    assert cfg.get_string_list("missing", ["x"]) == ["x"]
    assert cfg.get_double_list("test.empty_list", [1.0]) == []


def test_int_map_drops_bad_entries(cfg: ConfigAccessor) -> None:
    assert cfg.get_int_map("test.map_int", {}) == {"a": 1, "c": 2}


def test_string_and_double_maps(cfg: ConfigAccessor) -> None:
    assert cfg.get_string_map("test.map_string", {}) == {"a": "x"}
    assert cfg.get_double_map("test.map_double", {}) == {"a": 1.5, "b": 2.0}


def test_get_map_with_custom_parser(cfg: ConfigAccessor) -> None:
    def upper_or_none(value: Any) -> str | None:
        if isinstance(value, str):
            return value.upper()
        return None

    def exploding(value: Any) -> str:
        raise RuntimeError("parser failure")

    assert cfg.get_map("test.map_string", upper_or_none, {}) == {"a": "X"}
    assert cfg.get_map("test.map_string", exploding, {"keep": "me"}) == {}


def test_map_result_is_fresh(cfg: ConfigAccessor) -> None:
    default = {"fallback": 1}
    result = cfg.get_int_map("test.map_int", default)
    assert result is not default
    assert "fallback" not in result
    assert cfg.get_int_map("test.int", default) is default


def test_sections_scope_paths(cfg: ConfigAccessor) -> None:
    section = cfg.get_section("a.b")
    assert section is not None
    assert section.get_string("c", "") == "v"
    assert cfg.get_string("a.b.c", "") == "v"


def test_section_of_non_mapping_is_none(cfg: ConfigAccessor) -> None:
    assert cfg.get_section("test.int") is None
    assert cfg.get_section("missing") is None


def test_section_inherits_sink(cfg: ConfigAccessor, sink: RecordingSink) -> None:
    section = cfg.get_section("test")
    assert section is not None
    assert section.get_int("garbage", 3) == 3
    assert sink.calls == [("garbage", "int", 3)]


def test_mapping_interface() -> None:
    cfg = ConfigAccessor({"db": {"host": "localhost"}, "feature": True})
    assert cfg["feature"] is True
    assert "db" in cfg
    assert len(cfg) == 2
    assert sorted(cfg) == ["db", "feature"]
    assert cfg.get("db.host") == "localhost"
    assert cfg.get("db.port", 5432) == 5432


def test_accessor_is_read_only() -> None:
    cfg = ConfigAccessor({"a": 1})
    with pytest.raises(TypeError):
        cfg["a"] = 2  # type: ignore[index]


def test_as_dict_returns_deep_copy() -> None:
    source = {"db": {"host": "localhost"}}
    cfg = ConfigAccessor(source)
    clone = cfg.as_dict()
    clone["db"]["host"] = "remote"
    assert cfg.get_string("db.host", "") == "localhost"


def test_sink_is_accepted_by_keyword(sink: RecordingSink) -> None:
    cfg = ConfigAccessor({"n": "x"}, on_coercion_failure=sink)
    assert cfg.get_long("n", 1) == 1
    assert sink.calls == [("n", "long", 1)]
    assert cfg.on_coercion_failure is sink
