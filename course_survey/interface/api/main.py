from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ...application.session_store import InMemorySessionStore
from ...core.config import get_settings
from ...core.exceptions import SurveyError
from ...core.interfaces import LanguageModel, SessionStore
from ...core.logging import setup_logging
from ...managers.interview import PromptOrchestrator
from ...managers.lifecycle import SessionLifecycleController
from ...managers.llm import OpenAIChatModel

logger = structlog.get_logger(__name__)

async def survey_error_handler(request: Request, exc: SurveyError) -> JSONResponse:
    logger.warning(
        "request_failed",
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request_crashed", path=request.url.path, error=repr(exc))
    return JSONResponse(status_code=500, content={"error": "Internal server error"})

def create_app(
    store: Optional[SessionStore] = None,
    language_model: Optional[LanguageModel] = None,
) -> FastAPI:
    settings = get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version="0.1.0"
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, replace with actual origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    orchestrator = PromptOrchestrator(language_model or OpenAIChatModel(settings), settings)
    app.state.controller = SessionLifecycleController(store or InMemorySessionStore(), orchestrator)

    app.add_exception_handler(SurveyError, survey_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # Include routers
    from .routers import interview, health
    app.include_router(health.router, prefix=settings.API_PREFIX)
    app.include_router(interview.router, prefix=settings.API_PREFIX)

    return app
