"""Typed, read-only access to a parsed configuration document.

Purpose
-------
Wrap an already-parsed document and hand out values coerced to the type the
caller asks for, falling back to a caller-supplied default whenever the value
is missing, has the wrong shape, or cannot be coerced.

Contents
--------
* :class:`ConfigAccessor` – immutable ``Mapping`` exposing ``get_*`` helpers.
* :data:`CoercionSink` – signature of the diagnostic callback.
* :func:`log_coercion_failure` – default sink writing two warning records.
* ``_coerce_*`` helpers – single-value coercions shared by scalar, list, and
  map getters.

System Role
-----------
Failure handling is deliberately asymmetric:

* missing path or incompatible non-string value: default, silently;
* string (or out-of-range number) that fails to coerce: default, and the sink
  is told about the key and the substituted default;
* list and map elements that fail to coerce: the element is dropped, silently.

Nothing in this module raises for lookup or coercion problems.
"""

from __future__ import annotations

import re
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, TypeVar

from ..observability import log_warning, make_event
from .document import ABSENT, deepcopy_document, is_sequence, resolve_path

T = TypeVar("T")

CoercionSink = Callable[[str, str, Any], None]
"""``(key, target_type_name, default) -> None`` called on coercion failure."""

INT_MIN, INT_MAX = -(2**31), 2**31 - 1
LONG_MIN, LONG_MAX = -(2**63), 2**63 - 1

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def log_coercion_failure(key: str, target: str, default: Any) -> None:
    """Report a coercion failure through the package logger.

    Emits two warning records: ``coercion_failed`` naming the key and the
    requested type, then ``coercion_default_used`` carrying the default handed
    back to the caller.
    """

    log_warning("coercion_failed", **make_event("accessor", None, {"key": key, "target": target}))
    log_warning("coercion_default_used", **make_event("accessor", None, {"key": key, "default": default}))


@dataclass(frozen=True, slots=True)
class ConfigAccessor(MappingABC[str, Any]):
    """Immutable mapping with typed, default-returning getters.

    Why
    ----
    Configuration consumers want ``get_int("server.port", 8080)`` rather than
    hand-written ``isinstance`` ladders, and they never want a malformed file
    to crash them.

    Parameters
    ----------
    _data:
        Parsed document (as produced by ``yaml.safe_load``). Wrapped in a
        ``mappingproxy`` during initialisation.
    on_coercion_failure:
        Callable told about string-to-type coercion failures. Defaults to
        :func:`log_coercion_failure`.

    Examples
    --------
    >>> cfg = ConfigAccessor({"server": {"port": "8080", "host": "localhost"}})
    >>> cfg.get_int("server.port", 0)
    8080
    >>> cfg.get_string("server.missing", "fallback")
    'fallback'
    >>> cfg.get_section("server").get_string("host", "")
    'localhost'
    """

    _data: Mapping[str, Any]
    on_coercion_failure: CoercionSink = log_coercion_failure

    def __post_init__(self) -> None:
        object.__setattr__(self, "_data", MappingProxyType(dict(self._data)))

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str, default: Any = None) -> Any:  # type: ignore[override]
        """Resolve dotted *key* without coercion, returning *default* when missing.

        Examples
        --------
        >>> ConfigAccessor({"a": {"b": [1, 2]}}).get("a.b")
        [1, 2]
        >>> ConfigAccessor({}).get("a.b", "none")
        'none'
        """

        value = resolve_path(self._data, key)
        return default if value is ABSENT else value

    def as_dict(self) -> dict[str, Any]:
        """Return a deep, mutable copy of the wrapped document."""

        return deepcopy_document(self._data)

    # -- scalars -----------------------------------------------------------

    def get_string(self, path: str, default: str) -> str:
        """Return the string at *path*; non-string values yield *default*."""

        return self._scalar(path, default, _coerce_string, "string")

    def get_int(self, path: str, default: int) -> int:
        """Return a signed 32-bit integer, parsing strings when necessary."""

        return self._scalar(path, default, _coerce_int, "int")

    def get_long(self, path: str, default: int) -> int:
        """Return a signed 64-bit integer, parsing strings when necessary."""

        return self._scalar(path, default, _coerce_long, "long")

    def get_float(self, path: str, default: float) -> float:
        """Return a float; identical to :meth:`get_double` in Python."""

        return self._scalar(path, default, _coerce_float, "float")

    def get_double(self, path: str, default: float) -> float:
        return self._scalar(path, default, _coerce_float, "double")

    def get_boolean(self, path: str, default: bool) -> bool:
        """Return a boolean; strings ``"true"``/``"false"`` (any case) are parsed."""

        return self._scalar(path, default, _coerce_boolean, "boolean")

    # -- sequences ---------------------------------------------------------

    def get_string_list(self, path: str, default: list[str]) -> list[str]:
        """Return the string elements of the sequence at *path*.

        Examples
        --------
        >>> ConfigAccessor({"names": ["a", 1, "b"]}).get_string_list("names", [])
        ['a', 'b']
        """

        return self._list(path, default, _coerce_string)

    def get_int_list(self, path: str, default: list[int]) -> list[int]:
        """Return the sequence at *path* as integers, dropping unparsable elements.

        Examples
        --------
        >>> ConfigAccessor({"ports": ["1", "x", 3]}).get_int_list("ports", [42])
        [1, 3]
        """

        return self._list(path, default, _coerce_int)

    def get_long_list(self, path: str, default: list[int]) -> list[int]:
        return self._list(path, default, _coerce_long)

    def get_double_list(self, path: str, default: list[float]) -> list[float]:
        return self._list(path, default, _coerce_float)

    # -- mappings ----------------------------------------------------------

    def get_map(self, path: str, parser: Callable[[Any], T | None], default: dict[str, T]) -> dict[str, T]:
        """Return a fresh ``dict`` built by applying *parser* to every entry.

        Why
        ----
        Lets callers read homogeneous sections (``limits: {cpu: 2, mem: 4}``)
        with their own element rules.

        What
        ----
        When *path* resolves to a mapping, every entry with a string key is
        passed through *parser*. Entries whose parser raises or returns
        ``None`` are left out. Any other value at *path* yields *default*.

        Examples
        --------
        >>> cfg = ConfigAccessor({"limits": {"cpu": "2", "mem": "lots", 3: "x"}})
        >>> cfg.get_map("limits", int, {})
        {'cpu': 2}
        """

        value = resolve_path(self._data, path)
        if not isinstance(value, MappingABC):
            return default
        result: dict[str, T] = {}
        for key, raw in value.items():
            if not isinstance(key, str):
                continue
            try:
                parsed = parser(raw)
            except Exception:  # noqa: BLE001 - parser failures drop the entry
                continue
            if parsed is not None:
                result[key] = parsed
        return result

    def get_string_map(self, path: str, default: dict[str, str]) -> dict[str, str]:
        return self.get_map(path, _coerce_string, default)

    def get_int_map(self, path: str, default: dict[str, int]) -> dict[str, int]:
        return self.get_map(path, _coerce_int, default)

    def get_double_map(self, path: str, default: dict[str, float]) -> dict[str, float]:
        return self.get_map(path, _coerce_float, default)

    # -- sections ----------------------------------------------------------

    def get_section(self, path: str) -> ConfigAccessor | None:
        """Return an accessor scoped to the mapping at *path*, or ``None``.

        The section shares the diagnostic sink of its parent.
        """

        value = resolve_path(self._data, path)
        if not isinstance(value, MappingABC):
            return None
        return ConfigAccessor(value, self.on_coercion_failure)

    def _scalar(self, path: str, default: T, coerce: Callable[[Any], T], target: str) -> T:
        """Resolve *path* and coerce it, applying the default/diagnostic policy."""

        value = resolve_path(self._data, path)
        if value is ABSENT:
            return default
        try:
            return coerce(value)
        except TypeError:
            return default
        except (ValueError, OverflowError):
            self.on_coercion_failure(path, target, default)
            return default

    def _list(self, path: str, default: list[T], coerce: Callable[[Any], T]) -> list[T]:
        """Coerce every element of the sequence at *path*, dropping failures."""

        value = resolve_path(self._data, path)
        if not is_sequence(value):
            return default
        result: list[T] = []
        for item in value:
            try:
                result.append(coerce(item))
            except (TypeError, ValueError, OverflowError):
                continue
        return result


# Coercion helpers raise TypeError for an incompatible shape and ValueError /
# OverflowError for a value of the right shape that does not fit.


def _coerce_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    raise TypeError(f"expected string, got {type(value).__name__}")


def _coerce_integer(value: Any, lower: int, upper: int) -> int:
    """Return *value* as an ``int`` within ``[lower, upper]``.

    Examples
    --------
    >>> _coerce_integer(" -12 ", INT_MIN, INT_MAX)
    -12
    >>> _coerce_integer(3.9, INT_MIN, INT_MAX)
    3
    >>> _coerce_integer("1.5", INT_MIN, INT_MAX)
    Traceback (most recent call last):
    ...
    ValueError: not an integer: '1.5'
    """

    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    if isinstance(value, (int, float)):
        result = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not _INTEGER_PATTERN.fullmatch(text):
            raise ValueError(f"not an integer: {value!r}")
        result = int(text)
    else:
        raise TypeError(f"expected number, got {type(value).__name__}")
    if not lower <= result <= upper:
        raise OverflowError(f"{result} outside [{lower}, {upper}]")
    return result


def _coerce_int(value: Any) -> int:
    return _coerce_integer(value, INT_MIN, INT_MAX)


def _coerce_long(value: Any) -> int:
    return _coerce_integer(value, LONG_MIN, LONG_MAX)


def _coerce_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    if isinstance(value, (int, float, str)):
        return float(value)
    raise TypeError(f"expected number, got {type(value).__name__}")


def _coerce_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        raise ValueError(f"not a boolean: {value!r}")
    raise TypeError(f"expected boolean, got {type(value).__name__}")
