"""Typed reads and comment-preserving template writes for YAML configuration.

``ConfigAccessor`` coerces values found at dotted paths into the requested
type with caller-supplied defaults. ``TemplateBuilder`` writes a commented
configuration file and, on later runs, backfills only the keys the file lacks.
"""

from __future__ import annotations

from .application.merge import merge_missing
from .application.render import format_scalar, render_document
from .core import load_document, read_document
from .domain.accessor import ConfigAccessor, CoercionSink, log_coercion_failure
from .domain.document import ABSENT, resolve_path
from .domain.errors import ConfigError, DocumentIOError, InvalidFormat, NotFound
from .observability import bind_trace_id, get_logger
from .template import TemplateBuilder

__all__ = [
    "ABSENT",
    "CoercionSink",
    "ConfigAccessor",
    "ConfigError",
    "DocumentIOError",
    "InvalidFormat",
    "NotFound",
    "TemplateBuilder",
    "bind_trace_id",
    "format_scalar",
    "get_logger",
    "load_document",
    "log_coercion_failure",
    "merge_missing",
    "read_document",
    "render_document",
    "resolve_path",
]
