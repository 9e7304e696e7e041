"""Comment-aware text rendering of a document.

Purpose
-------
Serialise a document to YAML-shaped text while placing a header block and
per-key comments, something ``yaml.safe_dump`` cannot do.

Contents
    - ``render_document``: header, blank separator, then the body.
    - ``format_scalar``: single-line text for a leaf value.
    - ``key_text`` / ``resolve_key``: how keys are spelled and read back.
    - ``_render_mapping``: depth-first walk in insertion order.

System Role
-----------
The formatting is intentionally minimal. Strings are double-quoted with inner
double quotes backslash-escaped and nothing else escaped; sequence elements are
written in their plain text form without quoting. Values containing newlines
or YAML-significant characters inside sequences may therefore not parse back.
Floats and non-string keys use the spellings PyYAML reads back as the same
value (``1.0e-05``, ``.inf``, ``true``, ``null``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final, Iterable

import yaml
from yaml.nodes import ScalarNode
from yaml.representer import SafeRepresenter
from yaml.resolver import Resolver

INDENT = "  "

_REPRESENTER: Final = SafeRepresenter()
_RESOLVER: Final = Resolver()

# Plain-scalar tags whose resolved value is not the key string itself.
_IMPLICIT_KEY_TAGS: Final = frozenset(
    {
        "tag:yaml.org,2002:bool",
        "tag:yaml.org,2002:int",
        "tag:yaml.org,2002:float",
        "tag:yaml.org,2002:null",
    }
)


def render_document(
    document: Mapping[str, Any],
    header_lines: Iterable[str] = (),
    comments: Mapping[str, str] | None = None,
) -> str:
    """Return the text form of *document*.

    What
    ----
    Each header line becomes ``# <line>``; a blank line follows when there was
    at least one header line. Every key is then written at two spaces per
    nesting level, preceded by ``# <comment>`` when *comments* holds a
    non-blank entry for its full dotted path.

    Examples
    --------
    >>> text = render_document(
    ...     {"server": {"host": "localhost", "ports": [80, 443]}},
    ...     ["Generated"],
    ...     {"server.host": "Bind address"},
    ... )
    >>> print(text, end="")
    # Generated
    <BLANKLINE>
    server:
      # Bind address
      host: "localhost"
      ports: [80, 443]
    """

    lines = [f"# {line}" for line in header_lines]
    if lines:
        lines.append("")
    _render_mapping(document, "", [], comments or {}, lines)
    return "".join(f"{line}\n" for line in lines)


def _render_mapping(
    mapping: Mapping[str, Any],
    indent: str,
    segments: list[str],
    comments: Mapping[str, str],
    lines: list[str],
) -> None:
    for key, value in mapping.items():
        name = key_text(key)
        path = [*segments, name]
        comment = comments.get(".".join(path))
        if comment and comment.strip():
            lines.extend(f"{indent}# {part}" for part in comment.splitlines())
        if isinstance(value, Mapping) and value:
            lines.append(f"{indent}{name}:")
            _render_mapping(value, indent + INDENT, path, comments, lines)
        else:
            lines.append(f"{indent}{name}: {format_scalar(value)}")


def key_text(key: Any) -> str:
    """Return the spelling of a mapping key.

    String keys are written as they are; anything else (keys the parser read
    as ``true``, ``null`` or numbers) uses the YAML spelling of the value.

    Examples
    --------
    >>> key_text("port"), key_text(True), key_text(None), key_text(8080)
    ('port', 'true', 'null', '8080')
    """

    if isinstance(key, str):
        return key
    return _plain(key)


def resolve_key(key: Any) -> Any:
    """Return the value the YAML parser produces for *key* written unquoted.

    Why
    ----
    Under YAML 1.1 a key spelled ``on``, ``yes`` or ``null`` is read back as
    ``True`` or ``None``. The merge uses this to recognise such keys in an
    existing document as the template key that produced them.

    Examples
    --------
    >>> resolve_key("on"), resolve_key("null"), resolve_key("1")
    (True, None, 1)
    >>> resolve_key("port"), resolve_key(5)
    ('port', 5)
    """

    if not isinstance(key, str):
        return key
    tag = _RESOLVER.resolve(ScalarNode, key, (True, False))
    if tag not in _IMPLICIT_KEY_TAGS:
        return key
    return yaml.safe_load(key)


def format_scalar(value: Any) -> str:
    """Return the single-line text for a leaf value.

    Examples
    --------
    >>> format_scalar('say "hi"')
    '"say \\\\"hi\\\\""'
    >>> format_scalar(["a", 1, True])
    '[a, 1, true]'
    >>> format_scalar(None), format_scalar(False), format_scalar(2.5)
    ('null', 'false', '2.5')
    >>> format_scalar(1e-05), format_scalar(float("inf")), format_scalar([1e20])
    ('1.0e-05', '.inf', '[1.0e+20]')
    >>> format_scalar({})
    '{}'
    """

    if isinstance(value, str):
        return '"' + value.replace('"', '\\"') + '"'
    return _plain(value)


def _plain(value: Any) -> str:
    """Natural text of *value*; used for non-strings and for sequence elements."""

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _REPRESENTER.represent_float(value).value
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_plain(item) for item in value) + "]"
    if isinstance(value, Mapping):
        return "{" + ", ".join(f"{key_text(key)}: {_plain(item)}" for key, item in value.items()) + "}"
    return str(value)
