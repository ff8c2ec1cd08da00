"""
Text extraction for uploaded assignment files.
Supports PDF (via PyMuPDF) and plain text formats: TXT, MD, JSON, CSV.
"""
import os
import logging

from portal_backend.config import MAX_FILE_SIZE_FOR_TEXT

logger = logging.getLogger(__name__)

PDF_EXTENSIONS = ('.pdf',)
PDF_MIMETYPES = ('application/pdf',)
TEXT_EXTENSIONS = ('.txt', '.md', '.json', '.csv')
TEXT_MIMETYPES = ('text/plain', 'application/json', 'text/markdown', 'text/csv')


def _base_mimetype(mimetype):
    """'Text/Plain; charset=utf-8' -> 'text/plain'."""
    return (mimetype or '').split(';', 1)[0].strip().lower()


def _extract_pdf_text(filepath):
    """Extract text from a PDF file using PyMuPDF. Returns '' on failure."""
    try:
        import fitz
        with open(filepath, 'rb') as f:
            data = f.read()
        with fitz.open(stream=data, filetype="pdf") as doc:
            pages = [page.get_text() for page in doc]
        return "\n\n".join(pages)
    except Exception as e:
        logger.error("PDF parse error for %s: %s", filepath, e)
        return ''


def _read_text_file(filepath):
    try:
        with open(filepath, 'r', encoding='utf-8', errors='replace', newline='') as f:
            return f.read()
    except OSError as e:
        logger.error("Error reading text file %s: %s", filepath, e)
        return ''


def extract_text(filepath, mimetype, size) -> str:
    """
    Extract plain text from an uploaded file.

    Files larger than MAX_FILE_SIZE_FOR_TEXT are not read. The extension is
    checked first, the declared MIME type second. Unsupported formats and
    unreadable files yield an empty string.
    """
    if size > MAX_FILE_SIZE_FOR_TEXT:
        logger.info("Skipping text extraction for %s (%d bytes)", filepath, size)
        return ''

    ext = os.path.splitext(str(filepath))[1].lower()
    mime = _base_mimetype(mimetype)

    if ext in PDF_EXTENSIONS or mime in PDF_MIMETYPES:
        return _extract_pdf_text(filepath)

    if ext in TEXT_EXTENSIONS or mime in TEXT_MIMETYPES:
        return _read_text_file(filepath)

    return ''
