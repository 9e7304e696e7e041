"""Composition root for ``lib_config_template``.

Purpose
-------
Provide the read-side entry points that connect the YAML adapter with the
typed accessor.

Contents
--------
* :func:`load_document` – parse a YAML file into a native mapping.
* :func:`read_document` – parse a YAML file and wrap it in a
  :class:`~lib_config_template.domain.accessor.ConfigAccessor`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .adapters.file_loaders.yaml_loader import YAMLFileLoader
from .domain.accessor import CoercionSink, ConfigAccessor, log_coercion_failure
from .domain.document import deepcopy_document

_LOADER = YAMLFileLoader()


def load_document(path: str | Path) -> dict[str, Any]:
    """Return the YAML document at *path* as a mutable ``dict``.

    Raises
    ------
    NotFound / DocumentIOError / InvalidFormat
        See :meth:`YAMLFileLoader.load`.
    """

    return deepcopy_document(_LOADER.load(path))


def read_document(
    path: str | Path,
    *,
    on_coercion_failure: CoercionSink | None = None,
) -> ConfigAccessor:
    """Load the YAML document at *path* and wrap it for typed reads.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> target = Path(tmp.name) / "app.yml"
    >>> _ = target.write_text("server:\\n  port: '8080'\\n", encoding="utf-8")
    >>> read_document(target).get_int("server.port", 0)
    8080
    >>> tmp.cleanup()
    """

    data = _LOADER.load(path)
    return ConfigAccessor(data, on_coercion_failure or log_coercion_failure)
