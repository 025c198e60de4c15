import uuid
from typing import Dict, Optional

import structlog

from ..core.exceptions import PlanAlreadyAssignedError, SessionNotFoundError
from ..core.interfaces import SessionStore
from .interview_session import (
    EducationRole,
    InterviewAnalysis,
    InterviewPlan,
    InterviewSession,
    Message,
    SessionCost,
    SessionStatus,
    utcnow,
)

logger = structlog.get_logger(__name__)


class InMemorySessionStore(SessionStore):
    """Process-local session store.

    Sessions live until the process exits. Reads hand out deep copies so
    callers can never edit a stored transcript in place.
    """

    def __init__(self):
        self._sessions: Dict[str, InterviewSession] = {}

    def _require(self, session_id: str) -> InterviewSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def create_session(self, topic: str, role: EducationRole) -> str:
        session_id = str(uuid.uuid4())
        self._sessions[session_id] = InterviewSession(id=session_id, topic=topic, role=role)
        logger.debug("session_created", session_id=session_id, topic=topic)
        return session_id

    async def get_session(self, session_id: str) -> Optional[InterviewSession]:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        return session.model_copy(deep=True)

    async def update_session_status(self, session_id: str, status: SessionStatus) -> None:
        session = self._require(session_id)
        session.status = status
        session.updated_at = utcnow()

    async def save_plan(self, session_id: str, plan: InterviewPlan) -> None:
        session = self._require(session_id)
        if session.plan is not None:
            raise PlanAlreadyAssignedError(session_id)
        session.plan = plan
        session.updated_at = utcnow()

    async def save_message(self, session_id: str, message: Message) -> None:
        session = self._require(session_id)
        session.transcript.append(message)
        session.updated_at = utcnow()

    async def save_analysis(self, session_id: str, analysis: InterviewAnalysis) -> None:
        session = self._require(session_id)
        session.analysis = analysis
        session.updated_at = utcnow()

    async def add_cost(self, session_id: str, tokens: int, cost: float) -> None:
        session = self._require(session_id)
        current = session.cost or SessionCost()
        session.cost = SessionCost(tokens=current.tokens + tokens, cost=current.cost + cost)
        session.updated_at = utcnow()
