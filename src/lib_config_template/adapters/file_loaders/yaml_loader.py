"""YAML document loader.

Purpose
-------
Convert on-disk YAML into the plain ``dict`` / ``list`` / scalar trees the
accessor and the template writer work on. A thin wrapper around
``yaml.safe_load`` so error handling and observability live in one place.

Contents
--------
* :class:`YAMLFileLoader` – ``load`` for strict reads, ``load_existing`` for
  the lenient read performed before a template merge.

System Role
-----------
The only place the external parser is called. Anchors, tags beyond the safe
schema, and multi-document streams are not supported.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from ...domain.errors import DocumentIOError, InvalidFormat, NotFound
from ...observability import log_debug, log_error


class YAMLFileLoader:
    """Load YAML documents with PyYAML's safe loader."""

    def load(self, path: str | Path) -> Mapping[str, Any]:
        """Return the mapping stored in the YAML file at *path*.

        Raises
        ------
        NotFound
            When *path* is not a file.
        DocumentIOError
            When the file exists but cannot be read.
        InvalidFormat
            When the content is not valid YAML or its root is not a mapping.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', suffix='.yml', delete=False, encoding='utf-8')
        >>> _ = tmp.write('server:\\n  port: 8080\\n')
        >>> tmp.close()
        >>> YAMLFileLoader().load(tmp.name)["server"]["port"]
        8080
        >>> Path(tmp.name).unlink()
        """

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"Configuration file not found: {file_path}")
        data = self._parse(file_path)
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {file_path} did not produce a mapping")
        log_debug("document_loaded", layer="file", path=str(file_path), format="yaml")
        return data

    def load_existing(self, path: str | Path) -> Any:
        """Return the parsed root of *path*, or ``None`` when no file exists.

        Why
        ----
        The template writer needs to tell "no document yet" apart from
        "document with an unexpected root" and handles both itself.
        """

        file_path = Path(path)
        if not file_path.exists():
            return None
        return self._parse(file_path)

    def _parse(self, file_path: Path) -> Any:
        payload = self._read(file_path)
        try:
            return yaml.safe_load(payload)
        except yaml.YAMLError as exc:
            log_error("document_invalid", layer="file", path=str(file_path), format="yaml", error=str(exc))
            raise InvalidFormat(f"Invalid YAML in {file_path}: {exc}") from exc

    @staticmethod
    def _read(file_path: Path) -> bytes:
        """Read *file_path* as bytes, wrapping OS failures in :class:`DocumentIOError`."""

        try:
            payload = file_path.read_bytes()
        except OSError as exc:
            raise DocumentIOError(f"Failed to read {file_path}: {exc}") from exc
        log_debug("document_file_read", layer="file", path=str(file_path), size=len(payload))
        return payload
