"""POST /parse-file - Extract plain text from an uploaded file."""

import logging
import uuid

from fastapi import Depends, File, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from dependencies import get_file_parser
from responses import ResponseCode, error_response, success_response
from services import FileParser
from services.document import (
    DocumentParseError,
    FileTooLargeError,
    UnsupportedFileTypeError,
)
from utils import format_file_size

logger = logging.getLogger(__name__)


# --- Response Schema ---


class ParsedFile(BaseModel):
    """Extracted text and metadata for an uploaded file."""

    file_name: str = Field(..., description="Sanitized original filename")
    file_type: str | None = Field(None, description="Declared MIME type")
    file_size: int = Field(..., description="Upload size in bytes")
    content: str = Field(..., description="Extracted text, possibly truncated")
    content_length: int = Field(..., description="Length of the extracted text")


# --- Error mapping ---

PARSE_ERROR_MAP = {
    UnsupportedFileTypeError: ResponseCode.UNSUPPORTED_FILE_TYPE,
    FileTooLargeError: ResponseCode.FILE_TOO_LARGE,
    DocumentParseError: ResponseCode.CORRUPTED_FILE,
}


# --- Handler ---


async def parse_file(
    file: UploadFile | None = File(None),
    file_parser: FileParser = Depends(get_file_parser),
) -> JSONResponse:
    """Extract text from one uploaded file (TXT, MD, CSV, JSON, DOCX, XLSX, XLS, PDF).

    Flow:
    1. Reject missing file
    2. Read bytes and dispatch on the file extension
    3. Truncate long text
    """
    request_id = str(uuid.uuid4())[:8]

    if file is None:
        logger.warning("[%s] Parse request without a file", request_id)
        return error_response(ResponseCode.NO_FILE_PROVIDED, request_id=request_id)

    logger.info(
        "[%s] Parse: %s (%s)",
        request_id,
        file.filename,
        format_file_size(file.size or 0),
    )

    try:
        content = await file.read()
        extracted = await file_parser.extract(
            content,
            file.filename or "document",
            file.content_type,
        )

    except tuple(PARSE_ERROR_MAP.keys()) as e:
        code = PARSE_ERROR_MAP[type(e)]
        logger.warning("[%s] %s: %s", request_id, type(e).__name__, e)
        return error_response(code, str(e), request_id)

    except Exception as e:
        logger.exception("[%s] Unexpected error during parsing", request_id)
        return error_response(
            ResponseCode.INTERNAL_ERROR, str(e) or "Failed to parse file", request_id
        )

    finally:
        await file.close()

    parsed = ParsedFile(
        file_name=extracted.file_name,
        file_type=extracted.file_type,
        file_size=extracted.file_size,
        content=extracted.content,
        content_length=extracted.content_length,
    )

    logger.info(
        "[%s] Parsed: %s (%d chars%s)",
        request_id,
        parsed.file_name,
        parsed.content_length,
        ", truncated" if extracted.truncated else "",
    )
    return success_response(ResponseCode.FILE_PARSED, parsed.model_dump(), request_id)
