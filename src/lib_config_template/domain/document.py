"""Document tree primitives shared by the accessor and the template writer.

Purpose
-------
Describe the nested mapping/sequence/scalar tree (a *document*) and the
dotted-path conventions used to address locations inside it. Pure functions
only; no I/O.

Contents
--------
* :data:`ABSENT` – marker returned when a path does not resolve.
* :func:`split_path` – split a dotted path into its segments.
* :func:`resolve_path` – walk a document along a dotted path.
* :func:`is_document` / :func:`is_sequence` – tag checks for the value variants.
* :func:`deepcopy_document` / :func:`deepcopy_value` – clone trees without
  sharing mutable containers.

System Role
-----------
Dotted paths address mapping keys only. There is no escaping for literal dots
inside keys and no index syntax for sequences.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final, Union

Document = Mapping[str, Any]
"""A mapping from string keys to scalars, sequences, or nested documents."""

Scalar = Union[str, bool, int, float, None]


class _AbsentType:
    """Singleton type behind :data:`ABSENT`."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT: Final = _AbsentType()
"""Marker for "no value at this path", distinct from an explicit ``None``."""


def split_path(path: str) -> list[str]:
    """Return the segments of *path*.

    Examples
    --------
    >>> split_path("service.http.port")
    ['service', 'http', 'port']
    >>> split_path("flat")
    ['flat']
    """

    return path.split(".")


def is_valid_path(path: str) -> bool:
    """Return ``True`` when every segment of *path* is non-empty.

    Examples
    --------
    >>> is_valid_path("a.b")
    True
    >>> is_valid_path("a..b"), is_valid_path("")
    (False, False)
    """

    return all(split_path(path))


def is_document(value: object) -> bool:
    return isinstance(value, Mapping)


def is_sequence(value: object) -> bool:
    """Return ``True`` for list-like values (``str`` and ``bytes`` excluded)."""

    return isinstance(value, (list, tuple))


def resolve_path(root: Document, path: str) -> Any:
    """Resolve dotted *path* inside *root*, returning :data:`ABSENT` when missing.

    Why
    ----
    Typed getters and section lookups all start from the same walk; keeping it
    in one place guarantees they agree on what "missing" means.

    What
    ----
    Each segment must address a key of a mapping. When a segment is missing,
    or when a scalar or sequence is reached while segments remain, the result
    is :data:`ABSENT`. A stored ``None`` is returned as ``None``.

    Examples
    --------
    >>> doc = {"a": {"b": {"c": "v"}}, "n": 1}
    >>> resolve_path(doc, "a.b.c")
    'v'
    >>> resolve_path(doc, "a.x")
    ABSENT
    >>> resolve_path(doc, "n.deeper")
    ABSENT
    """

    current: Any = root
    for segment in split_path(path):
        if not isinstance(current, Mapping) or segment not in current:
            return ABSENT
        current = current[segment]
    return current


def deepcopy_document(document: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively clone a document into plain ``dict`` / ``list`` containers.

    Why
    ----
    ``copy.deepcopy`` cannot clone ``mappingproxy`` objects, which the accessor
    uses to keep its root read-only.

    Examples
    --------
    >>> source = {"a": {"b": [1, 2]}}
    >>> clone = deepcopy_document(source)
    >>> clone["a"]["b"].append(3)
    >>> source["a"]["b"]
    [1, 2]
    """

    return {key: deepcopy_value(value) for key, value in document.items()}


def deepcopy_value(value: Any) -> Any:
    """Clone nested values while preserving tuple/list container types."""

    if isinstance(value, Mapping):
        return deepcopy_document(value)
    if isinstance(value, list):
        return [deepcopy_value(item) for item in value]
    if isinstance(value, tuple):
        return tuple(deepcopy_value(item) for item in value)
    return value
