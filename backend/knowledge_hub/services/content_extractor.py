"""
Text extraction for uploaded files

Extraction is picked from a table keyed by the declared media type. Every
extractor returns either the text or an ``Unsupported`` marker; the marker's
placeholder string is what gets stored as the document content. Extraction
never fails an upload: errors are folded into a placeholder as well.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Union
import io
import json
import logging

from docx import Document as DocxDocument

logger = logging.getLogger(__name__)

TEXT_PLAIN = "text/plain"
TEXT_MARKDOWN = "text/markdown"
TEXT_CSV = "text/csv"
APPLICATION_JSON = "application/json"
MS_WORD = "application/msword"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@dataclass(frozen=True)
class Unsupported:
    """Marker for files that are accepted but whose text cannot be extracted"""
    reason: str

    def as_content(self) -> str:
        return f"[{self.reason}]"


ExtractionResult = Union[str, Unsupported]


def extract_plain_text(data: bytes) -> ExtractionResult:
    return data.decode("utf-8", errors="replace")


def extract_json(data: bytes) -> ExtractionResult:
    text = data.decode("utf-8", errors="replace")
    try:
        return json.dumps(json.loads(text), indent=2, ensure_ascii=False)
    except json.JSONDecodeError:
        return text


def extract_docx(data: bytes) -> ExtractionResult:
    document = DocxDocument(io.BytesIO(data))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def extract_legacy_doc(data: bytes) -> ExtractionResult:
    return Unsupported(
        "DOC file - content extraction not supported for .doc files. "
        "Please convert to .docx for full functionality."
    )


EXTRACTORS: Dict[str, Callable[[bytes], ExtractionResult]] = {
    TEXT_PLAIN: extract_plain_text,
    TEXT_MARKDOWN: extract_plain_text,
    TEXT_CSV: extract_plain_text,
    APPLICATION_JSON: extract_json,
    DOCX: extract_docx,
    MS_WORD: extract_legacy_doc,
}

ALLOWED_MEDIA_TYPES = frozenset(EXTRACTORS)


def extract_text(data: bytes, media_type: str, filename: str) -> str:
    """
    Text to store as a document's content

    Args:
        data: Raw file bytes
        media_type: Declared media type of the upload
        filename: Original filename, used in error placeholders

    Returns:
        Extracted text, or a bracketed placeholder for unsupported/failed extraction
    """
    extractor = EXTRACTORS.get(media_type)
    if extractor is None:
        return Unsupported(f"Unsupported file type: {media_type}").as_content()
    try:
        result = extractor(data)
    except Exception as e:
        logger.error(f"Content extraction error for {filename} ({media_type}): {e}")
        return f"[Error extracting content from {filename}: {e}]"
    if isinstance(result, Unsupported):
        logger.info(f"Content extraction unsupported for {filename}: {result.reason}")
        return result.as_content()
    return result
