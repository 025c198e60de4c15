from typing import Tuple

import structlog

from ..application.interview_session import (
    EducationRole,
    InterviewAnalysis,
    InterviewPlan,
    InterviewSession,
    Message,
    MessageRole,
    SessionStatus,
)
from ..application.plans import FIXED_TOPIC, get_plan, objectives_message, opening_message
from ..core.exceptions import (
    InvalidMessageError,
    InvalidSessionStateError,
    SessionNotFoundError,
    SurveyError,
)
from ..core.interfaces import SessionStore
from .interview import PromptOrchestrator
from .pricing import calculate_cost

logger = structlog.get_logger(__name__)


class SessionLifecycleController:
    """Owns the survey state machine.

    planning -> interviewing -> analyzing -> completed

    Wrap-up and completion are decided by the caller; the controller only
    checks the session status and never rewrites the transcript.
    """

    def __init__(
        self,
        store: SessionStore,
        orchestrator: PromptOrchestrator,
        role: EducationRole = EducationRole.STUDENT,
    ):
        self.store = store
        self.orchestrator = orchestrator
        self.role = role

    async def start(self) -> Tuple[InterviewSession, InterviewPlan]:
        try:
            session_id = await self.store.create_session(FIXED_TOPIC, self.role)
            plan = get_plan(self.role)
            await self.store.save_plan(session_id, plan)
            await self.store.save_message(
                session_id, Message(role=MessageRole.SYSTEM, content=objectives_message(plan))
            )
            await self.store.save_message(
                session_id, Message(role=MessageRole.ASSISTANT, content=opening_message(self.role))
            )
            await self.store.update_session_status(session_id, SessionStatus.INTERVIEWING)
            session = await self._load(session_id)
        except Exception as e:
            logger.error("survey_start_failed", error=str(e))
            raise SurveyError("Failed to start survey") from e

        logger.info("survey_started", session_id=session_id)
        return session, plan

    async def get(self, session_id: str) -> InterviewSession:
        return await self._load(session_id)

    async def post_message(self, session_id: str, user_text: str, is_wrap_up: bool = False) -> InterviewSession:
        text = (user_text or "").strip()
        if not text:
            raise InvalidMessageError("Message must not be empty")

        session = await self._load(session_id)
        self._require_status(session, SessionStatus.INTERVIEWING)

        # History is the transcript as it was before this message.
        history = list(session.transcript)
        await self.store.save_message(session_id, Message(role=MessageRole.USER, content=text))

        try:
            if is_wrap_up:
                reply, tokens = await self.orchestrator.generate_wrap_up(history, text)
            else:
                reply, tokens = await self.orchestrator.generate_follow_up(session.plan, history, text)
        except Exception as e:
            logger.error("reply_generation_failed", session_id=session_id, wrap_up=is_wrap_up, error=repr(e))
            raise SurveyError("Failed to send message") from e

        await self.store.save_message(session_id, Message(role=MessageRole.ASSISTANT, content=reply))
        await self._record_usage(session_id, tokens)

        logger.info("message_processed", session_id=session_id, wrap_up=is_wrap_up, tokens=tokens)
        return await self._load(session_id)

    async def complete(self, session_id: str) -> Tuple[InterviewSession, InterviewAnalysis]:
        session = await self._load(session_id)
        if session.status == SessionStatus.COMPLETED and session.analysis is not None:
            return session, session.analysis

        self._require_status(session, SessionStatus.INTERVIEWING, SessionStatus.ANALYZING)
        await self.store.update_session_status(session_id, SessionStatus.ANALYZING)

        analysis, tokens = await self.orchestrator.analyze(session.plan, session.transcript)
        await self.store.save_analysis(session_id, analysis)
        await self._record_usage(session_id, tokens)
        await self.store.update_session_status(session_id, SessionStatus.COMPLETED)

        logger.info(
            "survey_completed",
            session_id=session_id,
            user_messages=session.user_message_count,
            tokens=tokens,
        )
        session = await self._load(session_id)
        return session, analysis

    async def _load(self, session_id: str) -> InterviewSession:
        session = await self.store.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    @staticmethod
    def _require_status(session: InterviewSession, *allowed: SessionStatus) -> None:
        if session.status not in allowed:
            raise InvalidSessionStateError(
                session.id,
                session.status.value,
                " or ".join(status.value for status in allowed),
            )

    async def _record_usage(self, session_id: str, tokens: int) -> None:
        cost = calculate_cost(tokens, self.orchestrator.model_name)
        await self.store.add_cost(session_id, tokens, cost)
