from __future__ import annotations

from fastapi import HTTPException, Request, UploadFile, status

from app.ai.types import AIClient
from app.core.config import settings
from app.core.errors import ExtractionError
from app.parsing.models import UploadedDocument

UPLOAD_CHUNK_BYTES = 1024 * 64


def get_ai_client_dep(request: Request) -> AIClient | None:
    return getattr(request.app.state, "ai_client", None)


async def read_upload(file: UploadFile) -> UploadedDocument:
    limit = settings.max_upload_bytes
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {settings.max_upload_mb} MB.",
            )
        chunks.append(chunk)

    return UploadedDocument(
        filename=file.filename or "uploaded-file",
        content=b"".join(chunks),
        media_type=file.content_type or "",
    )


def raise_document_http_error(exc: ValueError) -> None:
    if isinstance(exc, ExtractionError):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
