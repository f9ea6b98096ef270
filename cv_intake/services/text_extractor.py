# cv_intake/services/text_extractor.py
import io
import logging
from typing import List

import fitz  # PyMuPDF
from docx import Document as DocxDocument
from docx.table import Table

from cv_intake.constants import ACCEPTED_EXTENSIONS
from cv_intake.utils import normalize_text

logger = logging.getLogger(__name__)


class UnsupportedFormatError(ValueError):
    """Raised for uploads that are neither PDF nor DOCX."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(
            f"Unsupported file type '{extension or '<none>'}'. "
            f"Accepted types: {', '.join(ACCEPTED_EXTENSIONS)}."
        )


def file_extension(filename: str) -> str:
    """Lower-cased suffix after the final '.', or "" when there is none."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].strip().lower()


def extract_text_from_pdf(pdf_file_stream: io.BytesIO) -> str:
    pdf_file_stream.seek(0)
    try:
        with fitz.open(stream=pdf_file_stream.read(), filetype="pdf") as doc:
            return "\n".join(page.get_text("text") for page in doc)
    except Exception as e:
        raise ValueError(f"Error processing PDF with PyMuPDF: {str(e)}") from e
    finally:
        pdf_file_stream.seek(0)


def _table_lines(table: Table) -> List[str]:
    lines = []
    for row in table.rows:
        previous = None
        for cell in row.cells:
            # Merged cells repeat the same cell object across the row.
            if cell._tc is previous:
                continue
            previous = cell._tc
            lines.extend(paragraph.text for paragraph in cell.paragraphs)
    return lines


def extract_text_from_docx(docx_file_stream: io.BytesIO) -> str:
    docx_file_stream.seek(0)
    try:
        doc = DocxDocument(docx_file_stream)
        lines: List[str] = []
        for block in doc.iter_inner_content():
            if isinstance(block, Table):
                lines.extend(_table_lines(block))
            else:
                lines.append(block.text)
        return "\n".join(lines)
    except Exception as e:
        raise ValueError(f"Error processing DOCX: {str(e)}") from e
    finally:
        docx_file_stream.seek(0)


_EXTRACTORS = {
    "pdf": extract_text_from_pdf,
    "docx": extract_text_from_docx,
}


def extract_text(content: bytes, extension: str) -> str:
    """
    Convert an uploaded document into plain text.

    Only PDF and DOCX are accepted; anything else raises UnsupportedFormatError.
    A document that cannot be parsed yields "" so the rest of the submission
    can still go through on the form fields alone.
    """
    kind = (extension or "").strip().lstrip(".").lower()
    extractor = _EXTRACTORS.get(kind)
    if extractor is None:
        raise UnsupportedFormatError(kind)

    stream = io.BytesIO(content or b"")
    try:
        raw_text = extractor(stream)
    except ValueError as e:
        logger.warning(f"Could not extract text from {kind} document: {e}")
        return ""
    finally:
        stream.close()

    return normalize_text(raw_text)
