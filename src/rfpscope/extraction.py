"""Text extraction from uploaded RFP files, keyed by mime type."""

import io
import logging
import mimetypes
from pathlib import Path
from typing import Optional

from .exceptions import UnsupportedFileTypeError

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_SUFFIXES = (".txt", ".md")


def detect_kind(mime_type: str, file_name: Optional[str] = None) -> str:
    """Classify an upload as ``"pdf"``, ``"docx"`` or ``"text"``.

    Raises:
        UnsupportedFileTypeError: for anything else
    """
    mime_type = (mime_type or "").lower()
    suffix = Path(file_name).suffix.lower() if file_name else ""

    if mime_type == PDF_MIME or suffix == ".pdf":
        return "pdf"
    if mime_type == DOCX_MIME or suffix == ".docx":
        return "docx"
    if mime_type.startswith("text/") or suffix in TEXT_SUFFIXES:
        return "text"

    raise UnsupportedFileTypeError(mime_type, file_name)


def guess_mime_type(path: str | Path) -> str:
    """Guess a file's mime type from its name."""
    path = Path(path)
    if path.suffix.lower() == ".docx":
        return DOCX_MIME
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type or "application/octet-stream"


def _extract_pdf(data: bytes) -> str:
    from pypdf import PdfReader

    reader = PdfReader(io.BytesIO(data))
    pages = [page.extract_text() or "" for page in reader.pages]
    return "\n\n".join(pages)


def _extract_docx(data: bytes) -> str:
    from docx import Document as DocxDocument

    doc = DocxDocument(io.BytesIO(data))
    return "\n".join(para.text for para in doc.paragraphs)


def extract_text(
    content: bytes | str,
    mime_type: str,
    file_name: Optional[str] = None,
) -> str:
    """Extract plain text from an uploaded file.

    ``str`` content is taken as already-extracted text and returned as is.

    Args:
        content: Raw file bytes, or text
        mime_type: Mime type reported by the uploader
        file_name: Original file name, used when the mime type is vague

    Returns:
        Extracted text

    Raises:
        UnsupportedFileTypeError: if the file type has no extractor
    """
    if isinstance(content, str):
        return content

    kind = detect_kind(mime_type, file_name)
    logger.debug(f"Extracting {kind} text from {file_name or 'upload'} ({len(content)} bytes)")

    if kind == "pdf":
        return _extract_pdf(content)
    if kind == "docx":
        return _extract_docx(content)
    return content.decode("utf-8", errors="replace")
