"""Domain-level exception hierarchy.

Purpose
-------
Expose the small error taxonomy shared by the YAML adapter, the template
writer, and consuming applications.

Contents
--------
* :class:`ConfigError` – umbrella base class for all library failures.
* :class:`InvalidFormat` – the YAML parser rejected a document.
* :class:`NotFound` – a document requested for reading does not exist.
* :class:`DocumentIOError` – a document could not be read from or written to
  disk.

System Role
-----------
Only genuine I/O and parse failures surface as exceptions. Missing keys, type
mismatches and coercion failures inside
:class:`~lib_config_template.domain.accessor.ConfigAccessor` are recovered
locally and never reach this hierarchy.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_config_template``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class InvalidFormat(ConfigError):
    """Raised when a YAML document cannot be parsed into a mapping."""


class NotFound(ConfigError):
    """Represents a document file that does not exist."""


class DocumentIOError(ConfigError, OSError):
    """Raised when a document file cannot be read or written.

    Why
    ----
    Callers may catch either :class:`ConfigError` (library view) or
    :class:`OSError` (I/O view). The underlying ``OSError`` is always chained
    as ``__cause__``.
    """
