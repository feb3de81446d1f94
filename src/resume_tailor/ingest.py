# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Extracts plain text from uploaded resume files (PDF, DOCX, TXT).
"""

import io
import os
import logging
from pathlib import Path
from typing import Optional

from docx import Document
from pypdf import PdfReader

from resume_tailor.config import DEFAULT_MAX_UPLOAD_BYTES
from resume_tailor.errors import ExtractionFailure, FileTooLarge, UnsupportedFormat

logger = logging.getLogger(__name__)

PDF = "pdf"
DOCX = "docx"
TEXT = "txt"

MIME_TYPES = {
    "application/pdf": PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DOCX,
    "text/plain": TEXT,
}

EXTENSIONS = {
    ".pdf": PDF,
    ".docx": DOCX,
    ".txt": TEXT,
}


def detect_format(filename: str, mime_type: Optional[str] = None) -> str:
    """
    Resolves the document format from the MIME hint, falling back to the
    file extension. Raises UnsupportedFormat when neither is recognised.
    """
    if mime_type:
        fmt = MIME_TYPES.get(mime_type.split(";")[0].strip().lower())
        if fmt:
            return fmt

    ext = os.path.splitext(filename or "")[1].lower()
    fmt = EXTENSIONS.get(ext)
    if fmt:
        return fmt

    raise UnsupportedFormat(f"Unsupported file type: {filename!r} (mime={mime_type!r})")


def check_size(data: bytes, limit: int = DEFAULT_MAX_UPLOAD_BYTES):
    if limit and len(data) > limit:
        raise FileTooLarge(f"Upload is {len(data)} bytes, limit is {limit}")


def read_pdf(data: bytes) -> str:
    """
    Extracts text from a PDF document, page by page.
    Multi-column layouts come out in whatever order pypdf finds the text.
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        full_text = []
        for page in reader.pages:
            text = page.extract_text()
            if text:
                full_text.append(text)
        return "\n".join(full_text)
    except Exception as e:
        logger.error(f"Error reading PDF: {e}")
        raise ExtractionFailure(f"PDF extraction failed: {e}") from e


def read_docx(data: bytes) -> str:
    """
    Extracts text from a DOCX document.
    Paragraphs come first, then the text of any table cells.
    """
    try:
        doc = Document(io.BytesIO(data))
        full_text = [para.text for para in doc.paragraphs]
        for table in doc.tables:
            for row in table.rows:
                seen = set()
                for cell in row.cells:
                    # Merged cells are reported once per grid column
                    if id(cell._tc) in seen:
                        continue
                    seen.add(id(cell._tc))
                    if cell.text.strip():
                        full_text.append(cell.text)
        return "\n".join(full_text)
    except Exception as e:
        logger.error(f"Error reading DOCX: {e}")
        raise ExtractionFailure(f"DOCX extraction failed: {e}") from e


def read_text(data: bytes) -> str:
    return data.decode("utf-8-sig", errors="replace")


READERS = {
    PDF: read_pdf,
    DOCX: read_docx,
    TEXT: read_text,
}


def extract_text(data: bytes, filename: str, mime_type: Optional[str] = None) -> str:
    """
    Converts an uploaded document into plain text.

    Args:
        data: Raw file bytes.
        filename: Original file name, used when the MIME hint is missing or unknown.
        mime_type: Optional MIME type reported by the uploader.

    Returns:
        The extracted text. May be empty (e.g. a scanned PDF).

    Raises:
        UnsupportedFormat: The format is not PDF, DOCX or TXT.
        ExtractionFailure: The decoder rejected the file.
    """
    fmt = detect_format(filename, mime_type)
    logger.debug(f"Extracting {fmt} text from {filename} ({len(data)} bytes)")
    text = READERS[fmt](data)
    logger.debug(f"Extracted {len(text)} characters from {filename}")
    return text


def read_file(path: str, mime_type: Optional[str] = None) -> str:
    """Reads a document from disk and extracts its text."""
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except OSError as e:
        logger.error(f"Error reading {path}: {e}")
        raise ExtractionFailure(f"Could not read {path}: {e}") from e
    return extract_text(data, file_path.name, mime_type)
