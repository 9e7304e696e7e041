from __future__ import annotations

import logging
from pathlib import Path

import pytest

from lib_config_template import TemplateBuilder
from lib_config_template.domain.errors import DocumentIOError, InvalidFormat


def _builder(tmp_path: Path) -> TemplateBuilder:
    return TemplateBuilder(tmp_path / "config.yml")


def test_add_creates_nested_mappings(tmp_path: Path) -> None:
    builder = _builder(tmp_path).add("a.b.c", "v", "").add("a.d", 1, "")
    assert builder.document == {"a": {"b": {"c": "v"}, "d": 1}}


def test_add_replaces_scalar_on_intermediate_segment(tmp_path: Path) -> None:
    builder = _builder(tmp_path).add("a", 1, "").add("a.b", 2, "")
    assert builder.document == {"a": {"b": 2}}


def test_add_records_comment_by_full_path(tmp_path: Path) -> None:
    builder = _builder(tmp_path).add("a.b", 1, "first").add("a.b", 2, "second").add("c", 3)
    assert dict(builder.comments) == {"a.b": "second", "c": ""}
    assert builder.document == {"a": {"b": 2}, "c": 3}


def test_add_copies_the_value(tmp_path: Path) -> None:
    value = {"key1": "val1"}
    builder = _builder(tmp_path).add("map", value, "")
    value["key2"] = "val2"
    builder.add("map.key3", "val3", "")
    assert builder.document == {"map": {"key1": "val1", "key3": "val3"}}
    assert value == {"key1": "val1", "key2": "val2"}


@pytest.mark.parametrize("path", ["", "a..b", "a.", ".a"])
def test_add_rejects_empty_segments(tmp_path: Path, path: str) -> None:
    with pytest.raises(ValueError):
        _builder(tmp_path).add(path, 1, "")


def test_header_accumulates_lines(tmp_path: Path) -> None:
    builder = _builder(tmp_path).header("one\ntwo\n").header(None).header("three")
    assert builder.header_lines == ("one", "two", "three")


def test_builder_methods_chain(tmp_path: Path) -> None:
    builder = _builder(tmp_path)
    assert builder.header("h") is builder
    assert builder.add("a", 1, "") is builder


def test_render_without_existing_document(tmp_path: Path) -> None:
    builder = _builder(tmp_path).header("Header").add("server.port", 8080, "Port")
    assert builder.render() == "# Header\n\nserver:\n  # Port\n  port: 8080\n"


def test_render_does_not_mutate_existing(tmp_path: Path) -> None:
    existing = {"server": {"port": 9000}}
    builder = _builder(tmp_path).add("server.host", "localhost", "")
    builder.render(existing)
    assert existing == {"server": {"port": 9000}}


def test_write_creates_file_and_parents(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "dir" / "config.yml"
    TemplateBuilder(target).add("a", True, "Flag").write()
    assert target.read_text(encoding="utf-8") == "# Flag\na: true\n"


def test_write_preserves_user_values_and_backfills(tmp_path: Path) -> None:
    target = tmp_path / "config.yml"
    target.write_text("server:\n  port: 9000\nextra: kept\n", encoding="utf-8")
    TemplateBuilder(target).add("server.port", 8080, "Port").add("server.host", "0.0.0.0", "Host").write()
    assert target.read_text(encoding="utf-8") == (
        "server:\n"
        "  # Port\n"
        "  port: 9000\n"
        "  # Host\n"
        '  host: "0.0.0.0"\n'
        'extra: "kept"\n'
    )


def test_write_treats_empty_file_as_empty_document(tmp_path: Path) -> None:
    target = tmp_path / "config.yml"
    target.write_text("", encoding="utf-8")
    TemplateBuilder(target).add("a", 1, "").write()
    assert target.read_text(encoding="utf-8") == "a: 1\n"


def test_write_replaces_non_mapping_root_with_warning(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="lib_config_template")
    target = tmp_path / "config.yml"
    target.write_text("- just\n- a list\n", encoding="utf-8")
    TemplateBuilder(target).add("a", 1, "").write()
    assert target.read_text(encoding="utf-8") == "a: 1\n"
    assert [record.getMessage() for record in caplog.records] == ["template_existing_not_mapping"]


def test_write_rejects_invalid_existing_yaml(tmp_path: Path) -> None:
    target = tmp_path / "config.yml"
    target.write_text("a: [broken\n", encoding="utf-8")
    with pytest.raises(InvalidFormat):
        TemplateBuilder(target).add("a", 1, "").write()
    assert target.read_text(encoding="utf-8") == "a: [broken\n"


def test_write_failure_raises_document_io_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(DocumentIOError) as excinfo:
        TemplateBuilder(blocker / "config.yml").add("a", 1, "").write()
    assert isinstance(excinfo.value.__cause__, OSError)


def test_unreadable_existing_target_raises_document_io_error(tmp_path: Path) -> None:
    target = tmp_path / "config.yml"
    target.mkdir()
    with pytest.raises(DocumentIOError):
        TemplateBuilder(target).add("a", 1, "").write()


def test_write_logs_completion(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="lib_config_template")
    target = tmp_path / "config.yml"
    TemplateBuilder(target).add("a", 1, "").write()
    record = caplog.records[-1]
    assert record.getMessage() == "template_written"
    assert getattr(record, "context")["path"] == str(target)
