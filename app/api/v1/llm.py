import asyncio

from fastapi import APIRouter, Depends, Request

from app.ai.factory import check_connection
from app.ai.types import AIClient
from app.api.deps import get_ai_client_dep
from app.core.rate_limit import rate_limit
from app.core.errors import LLMUnavailableError

router = APIRouter()


@router.get("/llm/status", summary="LLM Status", description="Check whether the configured LLM provider answers.")
@rate_limit()
async def llm_status(request: Request, client: AIClient | None = Depends(get_ai_client_dep)):
    _ = request
    if client is None:
        return {
            "success": True,
            "connected": False,
            "provider": None,
            "message": str(LLMUnavailableError()),
        }

    connected = await asyncio.to_thread(check_connection, client)
    return {
        "success": True,
        "connected": connected,
        "provider": client.name,
        "message": "LLM connection successful" if connected else "LLM connection failed",
    }
