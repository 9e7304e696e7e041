"""Application-layer backfill merge.

Purpose
-------
Fold a template document into an existing one without disturbing anything the
existing document already defines. This is what lets an application ship new
configuration keys while keeping every value a user has edited.

Contents
    - ``merge_missing``: public entry point; mutates the existing document.
    - ``_merge_mapping``: recursive stanza walking template keys in order.
    - ``_dotted_key``: joins ancestor segments for reporting.

System Role
-----------
Called by :meth:`lib_config_template.template.TemplateBuilder.write` between
loading the on-disk document and rendering the merged result. Free of I/O.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

from ..domain.document import deepcopy_value
from .render import resolve_key

_MISSING = object()


def merge_missing(existing: MutableMapping[str, Any], template: Mapping[str, Any]) -> list[str]:
    """Backfill keys from *template* into *existing* and report what was added.

    What
    ----
    For every template key, in template order:

    * absent from *existing*: a deep copy of the template value is inserted
      (whole subtrees included);
    * present in both and both values are mappings: recurse;
    * present in both otherwise: the existing value wins, even when its type
      differs from the template's.

    A template key matches an existing key when the YAML parser would read the
    template key written unquoted as that existing key (``on`` loads as
    ``True``). The existing entry then takes the template spelling in place so
    the next render writes the key the way the template does.

    Parameters
    ----------
    existing:
        Document loaded from disk. Mutated in place.
    template:
        Document assembled in memory. Never mutated.

    Returns
    -------
    list[str]
        Dotted paths of the keys that were inserted, in insertion order.

    Examples
    --------
    >>> existing = {"server": {"port": 9000}, "debug": "yes"}
    >>> merge_missing(existing, {"server": {"port": 8080, "host": "0.0.0.0"}, "debug": {"level": 1}})
    ['server.host']
    >>> existing
    {'server': {'port': 9000, 'host': '0.0.0.0'}, 'debug': 'yes'}
    >>> loaded = {True: "kept", "z": 1}
    >>> merge_missing(loaded, {"on": "template"})
    []
    >>> loaded
    {'on': 'kept', 'z': 1}
    """

    added: list[str] = []
    _merge_mapping(existing, template, [], added)
    return added


def _merge_mapping(
    target: MutableMapping[str, Any],
    source: Mapping[str, Any],
    segments: list[str],
    added: list[str],
) -> None:
    """Recursively merge ``source`` into ``target`` collecting inserted paths."""

    for key, value in source.items():
        match = _find_key(target, key)
        if match is _MISSING:
            target[key] = deepcopy_value(value)
            added.append(_dotted_key(segments, key))
            continue
        if match is not key:
            _rename_key(target, match, key)
        current = target[key]
        if isinstance(current, MutableMapping) and isinstance(value, Mapping):
            _merge_mapping(current, value, segments + [str(key)], added)


def _dotted_key(segments: list[str], key: Any) -> str:
    """Join *segments* and *key* with dots, skipping empties."""

    return ".".join([*segments, str(key)]) if segments else str(key)


def _find_key(target: Mapping[Any, Any], key: Any) -> Any:
    """Return the key of *target* that *key* addresses, or ``_MISSING``."""

    if key in target:
        return key
    resolved = resolve_key(key)
    if resolved is key:
        return _MISSING
    for candidate in target:
        if type(candidate) is type(resolved) and candidate == resolved:
            return candidate
    return _MISSING


def _rename_key(target: MutableMapping[Any, Any], old: Any, new: Any) -> None:
    """Replace key *old* with *new* in *target*, keeping entry order."""

    items = list(target.items())
    target.clear()
    for key, value in items:
        target[new if key is old else key] = value
