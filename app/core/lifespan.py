from contextlib import asynccontextmanager
import logging

from app.ai.factory import get_ai_client
from app.core.errors import LLMUnavailableError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    try:
        client = get_ai_client()
    except LLMUnavailableError as exc:
        logger.warning("llm_client_unavailable using_basic_analysis=1: %s", exc)
        client = None
    else:
        logger.info("llm_client_ready provider=%s model=%s", client.name, client.model)

    app.state.ai_client = client
    yield
    app.state.ai_client = None
