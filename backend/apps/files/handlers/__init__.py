"""File handlers."""

from apps.files.handlers.parse_file import parse_file

__all__ = [
    "parse_file",
]
