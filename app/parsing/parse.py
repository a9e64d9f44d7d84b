from __future__ import annotations

import logging
import re
from io import BytesIO
from zipfile import BadZipFile, ZipFile

from app.core.errors import ExtractionError

from .models import ExtractedText, SourceType, UploadedDocument

logger = logging.getLogger(__name__)

PAGE_MARKER = "--- Page {number} ---"
BYTE_SCAN_LIMIT = 1000
BYTE_SCAN_MIN_CHARS = 50

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MEDIA_TYPE_SOURCE_TYPES: dict[str, SourceType] = {
    "application/pdf": "pdf",
    DOCX_MEDIA_TYPE: "docx",
    "text/plain": "txt",
}
EXTENSION_SOURCE_TYPES: dict[str, SourceType] = {
    "pdf": "pdf",
    "docx": "docx",
    "txt": "txt",
}

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")

_READABLE_RUN_RE = re.compile(r"[A-Za-z0-9\s.,\-_]+")


def detect_source_type(filename: str, media_type: str = "") -> SourceType:
    ext = (filename.rsplit(".", 1)[-1].lower() if "." in filename else "")
    if ext in EXTENSION_SOURCE_TYPES:
        return EXTENSION_SOURCE_TYPES[ext]
    declared = (media_type or "").split(";", 1)[0].strip().lower()
    if declared in MEDIA_TYPE_SOURCE_TYPES:
        return MEDIA_TYPE_SOURCE_TYPES[declared]
    raise ValueError("Unsupported file format. Please upload PDF, DOCX, or TXT files.")


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            return any(name.startswith(prefixes) for name in archive.namelist())
    except BadZipFile:
        return False


def validate_upload_signature(*, source_type: SourceType, content: bytes) -> None:
    if not content:
        raise ValueError("Uploaded file is empty.")

    if source_type == "pdf":
        if not content.startswith(PDF_MAGIC):
            raise ValueError("File signature does not match .pdf content.")
        return

    if source_type == "docx":
        if not content.startswith(ZIP_MAGICS) or not _zip_has_paths(content, ("word/",)):
            raise ValueError("File signature does not match .docx content.")
        return

    if b"\x00" in content[:4096]:
        raise ValueError("File signature does not match .txt text content.")


def _pypdf_pages(content: bytes) -> list[str]:
    from pypdf import PdfReader

    reader = PdfReader(BytesIO(content))
    return [(page.extract_text() or "").strip() for page in reader.pages]


def _pdfplumber_pages(content: bytes) -> list[str]:
    import pdfplumber

    with pdfplumber.open(BytesIO(content)) as pdf:
        return [(page.extract_text() or "").strip() for page in pdf.pages]


def _join_pages(pages: list[str]) -> str:
    return "\n\n".join(
        f"{PAGE_MARKER.format(number=index)}\n{page_text}"
        for index, page_text in enumerate(pages, start=1)
    )


def byte_scan_text(content: bytes) -> str:
    """Best-effort recovery of printable runs from raw PDF bytes."""
    decoded = content.decode("utf-8", errors="replace")
    runs = _READABLE_RUN_RE.findall(decoded)
    if not runs:
        return ""
    return " ".join(runs)[:BYTE_SCAN_LIMIT].strip()


def extract_pdf(content: bytes) -> ExtractedText:
    warnings: list[str] = []

    for method, reader in (("pypdf", _pypdf_pages), ("pdfplumber", _pdfplumber_pages)):
        try:
            pages = reader(content)
        except Exception as exc:  # noqa: BLE001 - next tier takes over
            logger.warning("pdf_extract_failed method=%s: %s", method, exc)
            warnings.append(f"{method} failed: {exc}")
            continue
        if any(page.strip() for page in pages):
            logger.info("pdf_extract_ok method=%s pages=%s", method, len(pages))
            return ExtractedText(
                text=_join_pages(pages),
                source_type="pdf",
                method=method,
                pages=pages,
                warnings=warnings,
            )
        warnings.append(f"{method} found no extractable text.")

    text = byte_scan_text(content)
    if len(text) >= BYTE_SCAN_MIN_CHARS:
        logger.info("pdf_extract_ok method=byte-scan chars=%s", len(text))
        warnings.append("Structured PDF parsing failed; text was recovered from raw bytes.")
        return ExtractedText(text=text, source_type="pdf", method="byte-scan", warnings=warnings)

    logger.warning("pdf_extract_exhausted bytes=%s", len(content))
    raise ExtractionError("unreadable or unsupported PDF")


def extract_docx(content: bytes) -> ExtractedText:
    from docx import Document

    try:
        document = Document(BytesIO(content))
    except Exception as exc:  # noqa: BLE001 - python-docx raises several unrelated types
        raise ExtractionError(f"DOCX parsing failed: {exc}") from exc

    chunks = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text and cell.text.strip()]
            if cells:
                chunks.append(" | ".join(cells))

    text = "\n".join(chunks)
    if not text.strip():
        raise ExtractionError("No text content found in DOCX file.")
    return ExtractedText(text=text, source_type="docx", method="python-docx")


def extract_txt(content: bytes) -> ExtractedText:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ExtractionError("No text content found in TXT file.") from exc
    if not text.strip():
        raise ExtractionError("No text content found in TXT file.")
    return ExtractedText(text=text, source_type="txt", method="utf-8")


def extract_text(content: bytes, source_type: SourceType) -> ExtractedText:
    if source_type == "pdf":
        return extract_pdf(content)
    if source_type == "docx":
        return extract_docx(content)
    if source_type == "txt":
        return extract_txt(content)
    raise ExtractionError(f"Unsupported source type '{source_type}'.")


def extract_document(document: UploadedDocument) -> ExtractedText:
    source_type = detect_source_type(document.filename, document.media_type)
    validate_upload_signature(source_type=source_type, content=document.content)
    extracted = extract_text(document.content, source_type)
    logger.info(
        "document_extracted file=%s type=%s method=%s chars=%s",
        document.filename,
        source_type,
        extracted.method,
        len(extracted.text),
    )
    return extracted
