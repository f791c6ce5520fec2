"""Utility modules for Vellum.

Provides:
- text: escape_code, escape_attribute, pacify, unify_spaces
- logger: get_logger and excerpt for logging
"""

from vellum.utils.logger import excerpt, get_logger
from vellum.utils.text import escape_attribute, escape_code, pacify, unify_spaces

__all__ = [
    "escape_attribute",
    "escape_code",
    "excerpt",
    "get_logger",
    "pacify",
    "unify_spaces",
]
