# modules/resume/utils.py

import logging
from io import BytesIO
from typing import Optional

from docx import Document
from pypdf import PdfReader

log = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".pdf", ".docx", ".txt")


def allowed_resume_file(filename: str) -> bool:
    return (filename or "").lower().endswith(ALLOWED_EXTENSIONS)


def _pdf_text(data: bytes) -> str:
    reader = PdfReader(BytesIO(data))
    texts = []
    for page in reader.pages:
        try:
            texts.append(page.extract_text() or "")
        except Exception:
            # Skip pages that fail to parse
            continue
    return "\n".join(t for t in texts if t)


def _docx_text(data: bytes) -> str:
    doc = Document(BytesIO(data))
    return "\n".join(par.text for par in doc.paragraphs)


def extract_text_from_upload(file_storage) -> Optional[str]:
    """
    Accepts a werkzeug FileStorage (from request.files['resume']),
    returns extracted text or None on failure / unsupported type.
    """
    filename = (getattr(file_storage, "filename", "") or "").lower()
    try:
        data = file_storage.read()
        if not data:
            return None

        if filename.endswith(".pdf"):
            text = _pdf_text(data)
        elif filename.endswith(".docx"):
            text = _docx_text(data)
        elif filename.endswith(".txt"):
            text = data.decode("utf-8", errors="ignore")
        else:
            return None

        # Reset the stream pointer in case the caller needs to reuse it
        try:
            file_storage.stream.seek(0)
        except Exception:
            pass

        return text.strip() or None
    except Exception as e:
        log.warning("Resume parse failed for %s: %s", filename or "<unnamed>", e)
        return None
