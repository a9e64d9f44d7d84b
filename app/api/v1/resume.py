import asyncio

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from app.ai.types import AIClient
from app.api.deps import get_ai_client_dep, raise_document_http_error, read_upload
from app.core.rate_limit import rate_limit
from app.schemas.resume import ParsedResume, ResumeAnalysis, ResumeAnalysisRequest
from app.services.document_service import parse_resume_document
from app.services.resume_analyzer import analyze_resume

router = APIRouter()


@router.post("/resume/parse", response_model=ParsedResume)
@rate_limit()
async def parse_resume(
    request: Request,
    file: UploadFile = File(...),
    target_role: str | None = Form(default=None, alias="targetRole"),
    client: AIClient | None = Depends(get_ai_client_dep),
):
    _ = request
    document = await read_upload(file)
    try:
        return await asyncio.to_thread(parse_resume_document, document, client, target_role)
    except ValueError as exc:
        raise_document_http_error(exc)


@router.post("/resume/analyze", response_model=ResumeAnalysis)
@rate_limit()
async def analyze_resume_text(
    request: Request,
    payload: ResumeAnalysisRequest,
    client: AIClient | None = Depends(get_ai_client_dep),
):
    _ = request
    return await asyncio.to_thread(analyze_resume, payload.text, payload.target_role, client)
