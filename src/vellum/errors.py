"""Exception classes for Vellum.

Rendering and sanitizing never raise on user content; malformed input
degrades to literal or empty output. Exceptions are reserved for broken
configuration detected while it is being loaded.
"""

from __future__ import annotations


class VellumError(Exception):
    """Base exception for all Vellum errors.

    Subclass this for specific error categories.
    """

    pass


class ConfigError(VellumError):
    """Invalid configuration source.

    Raised when a whitelist schema, template file or config mapping cannot
    be turned into an immutable table.
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        """Initialize config error with optional source.

        Args:
            message: Error description
            source: File path or key the bad value came from (optional)
        """
        self.message = message
        self.source = source

        prefix = f"{source}: " if source else ""
        super().__init__(f"{prefix}{message}")
