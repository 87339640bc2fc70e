"""Services module for business logic shared by the API handlers.

Contains:
- File text extraction (TXT, MD, CSV, JSON, DOCX, XLSX, XLS, PDF)
- Chat request shaping around the LLM provider

Note: Service instances are managed via dependencies.py using FastAPI DI.
"""

from services.types import Completion, ExtractedFile, TokenUsage
from services.document import (
    DocumentParseError,
    FileParser,
    FileTooLargeError,
    UnsupportedFileTypeError,
)
from services.chat import ChatService

__all__ = [
    # Core services
    "ChatService",
    "FileParser",
    # Errors
    "DocumentParseError",
    "FileTooLargeError",
    "UnsupportedFileTypeError",
    # Types
    "Completion",
    "ExtractedFile",
    "TokenUsage",
]
