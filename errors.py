"""Exceptions raised while encoding print commands.

Every encoder builds the full byte string of a call before it is appended
to the output stream, so any of these leaves the stream untouched.

Hierarchy:
    EncodingError
    ├── ConfigurationError  (unknown command name, bad option combination)
    └── ValidationError     (value out of the range the protocol accepts)
"""

from __future__ import annotations

__all__ = ["EncodingError", "ConfigurationError", "ValidationError"]


class EncodingError(Exception):
    """Base class for command encoding failures."""


class ConfigurationError(EncodingError, ValueError):
    """Unsupported symbology, unknown named command or malformed options."""


class ValidationError(EncodingError, ValueError):
    """Payload or argument value the protocol cannot carry."""
