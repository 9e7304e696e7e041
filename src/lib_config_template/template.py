"""Template-based configuration writer.

Purpose
-------
Let an application declare the configuration it expects (keys, defaults,
comments, header) and write it to disk. When the file already exists, only the
keys it lacks are added; every value the user has set survives.

Contents
--------
* :class:`TemplateBuilder` – chaining builder with ``header``, ``add``,
  ``render`` and ``write``.
* :func:`_split_header` / :func:`_insert_nested` – helpers narrating how
  header text and dotted paths are stored.

System Role
-----------
Orchestrates the YAML adapter (load existing), the merge policy
(:func:`~lib_config_template.application.merge.merge_missing`) and the renderer
(:func:`~lib_config_template.application.render.render_document`). A builder
is not safe for concurrent mutation. Writes are not atomic.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .adapters.file_loaders.yaml_loader import YAMLFileLoader
from .application.merge import merge_missing
from .application.render import render_document
from .domain.document import deepcopy_document, deepcopy_value, is_valid_path, split_path
from .domain.errors import DocumentIOError
from .observability import log_debug, log_info, log_warning, make_event


class TemplateBuilder:
    """Accumulate keys, comments and a header, then merge them into a file.

    Examples
    --------
    >>> builder = (
    ...     TemplateBuilder("app.yml")
    ...     .header("My application")
    ...     .add("server.port", 8080, "Listening port")
    ... )
    >>> print(builder.render({"server": {"port": 9000}}), end="")
    # My application
    <BLANKLINE>
    server:
      # Listening port
      port: 9000
    """

    def __init__(self, path: str | Path, *, loader: YAMLFileLoader | None = None) -> None:
        self.path = Path(path)
        self._loader = loader or YAMLFileLoader()
        self._root: dict[str, Any] = {}
        self._comments: dict[str, str] = {}
        self._header: list[str] = []

    @property
    def document(self) -> dict[str, Any]:
        """Deep copy of the template document assembled so far."""

        return deepcopy_document(self._root)

    @property
    def comments(self) -> Mapping[str, str]:
        return MappingProxyType(self._comments)

    @property
    def header_lines(self) -> tuple[str, ...]:
        return tuple(self._header)

    def header(self, text: str | None) -> TemplateBuilder:
        """Append the lines of *text* to the header block; ``None`` is ignored.

        Examples
        --------
        >>> TemplateBuilder("x.yml").header("one\\ntwo\\n").header("three").header_lines
        ('one', 'two', 'three')
        """

        if text is not None:
            self._header.extend(_split_header(text))
        return self

    def add(self, path: str, value: Any, comment: str | None = None) -> TemplateBuilder:
        """Place *value* at dotted *path* and remember *comment* for that path.

        Missing intermediate mappings are created. A non-mapping value sitting
        on an intermediate segment is replaced by a fresh mapping, so
        ``add("a", 1)`` followed by ``add("a.b", 2)`` leaves ``{"a": {"b": 2}}``.

        Raises
        ------
        ValueError
            When *path* contains an empty segment.
        """

        if not is_valid_path(path):
            raise ValueError(f"Invalid dotted path: {path!r}")
        _insert_nested(self._root, split_path(path), deepcopy_value(value))
        self._comments[path] = comment or ""
        return self

    def render(self, existing: Any = None) -> str:
        """Return the text produced by merging the template into *existing*.

        *existing* is a parsed document, typically the content of the target
        file. Anything that is not a mapping counts as an empty document. The
        argument is not mutated.
        """

        merged = deepcopy_document(existing) if isinstance(existing, Mapping) else {}
        added = merge_missing(merged, self._root)
        log_debug("template_merged", **make_event("template", str(self.path), {"backfilled": len(added)}))
        return render_document(merged, self._header, self._comments)

    def write(self) -> None:
        """Merge the template into the target file and write the result.

        Raises
        ------
        DocumentIOError
            When the existing file cannot be read or the result cannot be
            written.
        InvalidFormat
            When the existing file is not valid YAML.
        """

        existing = self._loader.load_existing(self.path)
        if existing is not None:
            log_debug("template_existing_loaded", **make_event("template", str(self.path)))
            if not isinstance(existing, Mapping):
                log_warning(
                    "template_existing_not_mapping",
                    **make_event("template", str(self.path), {"type": type(existing).__name__}),
                )
        text = self.render(existing)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise DocumentIOError(f"Failed to write {self.path}: {exc}") from exc
        log_info("template_written", **make_event("template", str(self.path), {"size": len(text)}))


def _split_header(text: str) -> list[str]:
    """Split header *text* into lines, dropping the empties a trailing newline leaves.

    Examples
    --------
    >>> _split_header("A\\r\\nB\\n\\n")
    ['A', 'B']
    >>> _split_header("")
    ['']
    """

    lines = [line.rstrip("\r") for line in text.split("\n")]
    while len(lines) > 1 and not lines[-1]:
        lines.pop()
    return lines


def _insert_nested(root: dict[str, Any], segments: list[str], value: Any) -> None:
    """Store *value* under *segments*, replacing non-mapping intermediates."""

    current = root
    for segment in segments[:-1]:
        nested = current.get(segment)
        if not isinstance(nested, dict):
            nested = {}
            current[segment] = nested
        current = nested
    current[segments[-1]] = value
