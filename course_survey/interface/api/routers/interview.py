from fastapi import APIRouter, Depends, Request

from ....core.config import Settings, get_settings
from ....managers.lifecycle import SessionLifecycleController
from ..schemas import (
    CompleteRequest,
    CompleteResponse,
    ErrorResponse,
    MessageRequest,
    SessionResponse,
    StartResponse,
    TimingPolicy,
)

router = APIRouter(
    prefix="/interview",
    tags=["interview"],
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)

def get_controller(request: Request) -> SessionLifecycleController:
    return request.app.state.controller

@router.post("/start", response_model=StartResponse, response_model_exclude_none=True)
async def start_survey(controller: SessionLifecycleController = Depends(get_controller)):
    """Create a session and return it with its greeting and plan."""
    session, plan = await controller.start()
    return StartResponse(session_id=session.id, session=session, plan=plan)

@router.post(
    "/message",
    response_model=SessionResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}},
)
async def post_message(
    body: MessageRequest,
    controller: SessionLifecycleController = Depends(get_controller),
):
    """Append the student's message and the assistant's reply."""
    session = await controller.post_message(body.session_id, body.message, body.is_wrap_up)
    return SessionResponse(session=session)

@router.post("/complete", response_model=CompleteResponse, response_model_exclude_none=True)
async def complete_survey(
    body: CompleteRequest,
    controller: SessionLifecycleController = Depends(get_controller),
):
    session, analysis = await controller.complete(body.session_id)
    return CompleteResponse(session=session, analysis=analysis)

@router.get("/config", response_model=TimingPolicy)
async def timing_policy(settings: Settings = Depends(get_settings)):
    """Wrap-up and idle thresholds the client should apply."""
    return TimingPolicy(
        target_duration_ms=settings.TARGET_DURATION_MS,
        idle_nudge_ms=settings.IDLE_NUDGE_MS,
        min_exchanges_for_completion=settings.MIN_EXCHANGES_FOR_COMPLETION,
    )

@router.get("/{session_id}", response_model=SessionResponse, response_model_exclude_none=True)
async def get_session(session_id: str, controller: SessionLifecycleController = Depends(get_controller)):
    return SessionResponse(session=await controller.get(session_id))
