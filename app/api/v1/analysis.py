import asyncio

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from app.ai.types import AIClient
from app.api.deps import get_ai_client_dep, raise_document_http_error, read_upload
from app.core.config import settings
from app.core.rate_limit import rate_limit
from app.schemas.analysis import AnalysisResult, DocumentExtraction, EngineeringAnalysisRequest
from app.services.document_service import extract_engineering_document
from app.services.engineering_analyzer import analyze_engineering

router = APIRouter()


@router.post("/analyze-engineering", response_model=AnalysisResult)
@rate_limit()
async def analyze_engineering_text(
    request: Request,
    payload: EngineeringAnalysisRequest,
    client: AIClient | None = Depends(get_ai_client_dep),
):
    _ = request
    text = payload.text or ""
    if len(text.strip()) < settings.min_analysis_chars:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Text is too short for meaningful analysis",
        )
    return await asyncio.to_thread(analyze_engineering, text, client)


@router.post("/documents/extract", response_model=DocumentExtraction)
@rate_limit()
async def extract_document_endpoint(
    request: Request,
    file: UploadFile = File(...),
    client: AIClient | None = Depends(get_ai_client_dep),
):
    _ = request
    document = await read_upload(file)
    try:
        return await asyncio.to_thread(extract_engineering_document, document, client)
    except ValueError as exc:
        raise_document_http_error(exc)
