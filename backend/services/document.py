"""File text extraction service for uploaded documents.

Handles:
- Size validation and filename sanitization
- Plain text families (TXT, MD, CSV) passed through as UTF-8
- JSON re-serialized with indentation
- DOCX (python-docx), XLSX (openpyxl), XLS (xlrd), PDF (PyMuPDF)
- Truncation of long extracted text

All blocking parsing runs through asyncio.to_thread to keep the event loop free.
"""

import asyncio
import csv
import io
import json
import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import fitz  # PyMuPDF
import openpyxl
import xlrd
from docx import Document as DocxDocument

from config import get_settings
from services.types import ExtractedFile

logger = logging.getLogger(__name__)

# Extensions offered by the upload picker; anything else falls back to UTF-8
SUPPORTED_EXTENSIONS = frozenset(
    {".txt", ".md", ".csv", ".json", ".docx", ".xlsx", ".xls", ".pdf"}
)
PLAIN_TEXT_EXTENSIONS = frozenset({".txt", ".md", ".csv"})

TRUNCATION_MARKER = "\n\n[... Content truncated due to length ...]"
PDF_FAILURE_PLACEHOLDER = "[PDF parsing failed - file may be image-based or corrupted]"


class DocumentParseError(Exception):
    """Raised when a known file format cannot be decoded."""

    pass


class UnsupportedFileTypeError(Exception):
    """Raised when file type is not supported."""

    pass


class FileTooLargeError(Exception):
    """Raised when file exceeds size limit."""

    pass


def truncate_content(text: str, max_chars: int) -> tuple[str, bool]:
    """Cut text to max_chars and append the truncation marker.

    Returns:
        Tuple of (text, was_truncated).
    """
    if len(text) <= max_chars:
        return text, False
    return text[:max_chars] + TRUNCATION_MARKER, True


class FileParser:
    """Service for turning uploaded files into prompt-ready text."""

    def __init__(self, max_content_chars: int | None = None) -> None:
        """Initialize file parser."""
        self.settings = get_settings()
        self.max_content_chars = max_content_chars or self.settings.max_content_chars

    def sanitize_filename(self, filename: str) -> str:
        """Sanitize filename to prevent path traversal and other issues."""
        if not filename:
            return "document"

        filename = Path(filename.replace("\\", "/")).name
        filename = re.sub(r'[<>:"/\\|?*\x00-\x1f]', "_", filename)

        max_length = 255
        if len(filename) > max_length:
            name, ext = Path(filename).stem, Path(filename).suffix
            filename = name[: max_length - len(ext)] + ext

        if not filename or filename.startswith("."):
            filename = "document" + Path(filename).suffix

        return filename

    def validate_size(self, file_size: int) -> None:
        """Reject uploads above the configured size limit."""
        if file_size > self.settings.max_file_size_bytes:
            raise FileTooLargeError(
                f"File size {file_size} exceeds limit of {self.settings.max_file_size_mb}MB"
            )

    async def extract(
        self,
        content: bytes,
        filename: str,
        content_type: str | None = None,
    ) -> ExtractedFile:
        """Extract text from an uploaded file.

        Args:
            content: Raw file bytes.
            filename: Declared file name; its suffix selects the extractor.
            content_type: Declared MIME type, reported back unchanged.

        Returns:
            ExtractedFile with (possibly truncated) text.

        Raises:
            FileTooLargeError: Upload is above the size limit.
            UnsupportedFileTypeError: Unknown suffix and not valid UTF-8.
            DocumentParseError: JSON, Word or spreadsheet decoding failed.
        """
        self.validate_size(len(content))

        ext = Path(filename.lower()).suffix
        text = await asyncio.to_thread(self._extract_sync, content, ext)
        text, truncated = truncate_content(text, self.max_content_chars)

        if truncated:
            logger.info(
                "Truncated %s to %d characters", filename, self.max_content_chars
            )

        return ExtractedFile(
            file_name=self.sanitize_filename(filename),
            file_type=content_type,
            file_size=len(content),
            content=text,
            truncated=truncated,
        )

    def _extract_sync(self, content: bytes, ext: str) -> str:
        """Dispatch to the extractor for a lowercase suffix (synchronous)."""
        if ext in PLAIN_TEXT_EXTENSIONS:
            return self._decode_utf8(content)
        if ext == ".json":
            return self._parse_json_sync(content)
        if ext == ".docx":
            return self._parse_docx_sync(content)
        if ext == ".xlsx":
            return self._parse_xlsx_sync(content)
        if ext == ".xls":
            return self._parse_xls_sync(content)
        if ext == ".pdf":
            return self._parse_pdf_sync(content)

        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise UnsupportedFileTypeError(
                f"Unsupported file type '{ext or 'unknown'}'. Supported: "
                f"{', '.join(sorted(SUPPORTED_EXTENSIONS))}"
            ) from e

    def _decode_utf8(self, content: bytes) -> str:
        """Decode text content, replacing undecodable bytes."""
        return content.decode("utf-8", errors="replace")

    def _parse_json_sync(self, content: bytes) -> str:
        """Re-serialize JSON with two-space indentation."""
        try:
            data = json.loads(self._decode_utf8(content))
        except json.JSONDecodeError as e:
            raise DocumentParseError(f"Invalid JSON: {e}") from e
        return json.dumps(data, indent=2, ensure_ascii=False)

    def _parse_docx_sync(self, content: bytes) -> str:
        """Parse Word document using python-docx (synchronous)."""
        try:
            doc = DocxDocument(io.BytesIO(content))
            text_parts = []

            # Extract paragraphs
            for p in doc.paragraphs:
                if p.text.strip():
                    text_parts.append(p.text)

            # Extract tables
            for table in doc.tables:
                for row in table.rows:
                    row_text = " | ".join(cell.text.strip() for cell in row.cells)
                    if row_text.strip(" |"):
                        text_parts.append(row_text)

            return "\n\n".join(text_parts)

        except Exception as e:
            raise DocumentParseError(f"Failed to parse DOCX: {e}") from e

    def _parse_xlsx_sync(self, content: bytes) -> str:
        """Parse Excel workbook using openpyxl (synchronous)."""
        try:
            workbook = openpyxl.load_workbook(
                io.BytesIO(content), read_only=True, data_only=True
            )
        except Exception as e:
            raise DocumentParseError(f"Failed to parse XLSX: {e}") from e

        try:
            sheets = [
                (sheet.title, sheet.iter_rows(values_only=True))
                for sheet in workbook.worksheets
            ]
            return "".join(
                self._format_sheet(name, rows) for name, rows in sheets
            )
        finally:
            workbook.close()

    def _parse_xls_sync(self, content: bytes) -> str:
        """Parse legacy Excel workbook using xlrd (synchronous)."""
        try:
            workbook = xlrd.open_workbook(file_contents=content)
        except Exception as e:
            raise DocumentParseError(f"Failed to parse XLS: {e}") from e

        return "".join(
            self._format_sheet(
                sheet.name,
                (sheet.row_values(i) for i in range(sheet.nrows)),
            )
            for sheet in workbook.sheets()
        )

    def _format_sheet(self, name: str, rows: Iterable[Iterable[Any]]) -> str:
        """Render one sheet as a header line followed by CSV rows."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        for row in rows:
            writer.writerow(self._format_cell(value) for value in row)
        return f"\n=== Sheet: {name} ===\n" + buffer.getvalue().rstrip("\n")

    def _format_cell(self, value: Any) -> str:
        if value is None:
            return ""
        # Spreadsheet libraries report whole numbers as floats
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    def _parse_pdf_sync(self, content: bytes) -> str:
        """Parse PDF using PyMuPDF (synchronous).

        Extraction failures degrade to a placeholder so the upload still
        succeeds.
        """
        doc = None
        try:
            doc = fitz.open(stream=content, filetype="pdf")
            text_parts = []

            for page_num, page in enumerate(doc, start=1):
                try:
                    page_text = page.get_text()
                    if page_text:
                        text_parts.append(page_text)
                except Exception as e:
                    logger.warning(
                        "Failed to extract text from page %d: %s", page_num, e
                    )

            return "\n\n".join(text_parts)

        except Exception as e:
            logger.warning("PDF extraction failed, using placeholder: %s", e)
            return PDF_FAILURE_PLACEHOLDER
        finally:
            if doc is not None:
                doc.close()
