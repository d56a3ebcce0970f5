"""FastAPI application factory for the chat API."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from streamchat import __version__
from streamchat.agent.config import get_agent_config
from streamchat.api.chat import router as chat_router
from streamchat.settings import ServerSettings, get_server_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Report at startup whether the chat backend can answer requests."""
    try:
        agent_config = get_agent_config()
    except ValueError as e:
        logger.warning(f"Chat backend not configured; /api/chat will answer 500: {e}")
    else:
        logger.info(f"Chat backend ready (model {agent_config.model_name})")
    yield
    logger.info("Chat API stopped")


def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Create the chat API.

    Args:
        settings: Server settings. Loads from environment if not provided.

    Returns:
        FastAPI application with the chat router and a health check.
    """
    settings = settings or get_server_settings()
    application = FastAPI(
        title="streamchat API",
        description="Streams chat replies as newline-delimited text frames.",
        version=__version__,
        lifespan=lifespan,
    )

    # Browsers reject credentialed requests to a wildcard origin.
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": "streamchat", "version": __version__}

    return application


app = create_app()
