from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..application.interview_session import (
    EducationRole,
    InterviewAnalysis,
    InterviewPlan,
    InterviewSession,
    Message,
    SessionStatus,
)

@dataclass(frozen=True)
class Completion:
    content: str
    token_usage: int = 0

class LanguageModel(ABC):
    model_name: str

    @abstractmethod
    async def invoke(self, prompt: str) -> Completion:
        """Send one prompt and return the whole completion."""
        pass

class PlanProvider(ABC):
    @abstractmethod
    def get_plan(self) -> InterviewPlan:
        """Return the fixed plan for this provider's role."""
        pass

    def get_first_question(self) -> str:
        return self.get_plan().questions[0]

class SessionStore(ABC):
    @abstractmethod
    async def create_session(self, topic: str, role: EducationRole) -> str:
        """Create a session in the planning state and return its id."""
        pass

    @abstractmethod
    async def get_session(self, session_id: str) -> Optional[InterviewSession]:
        pass

    @abstractmethod
    async def update_session_status(self, session_id: str, status: SessionStatus) -> None:
        pass

    @abstractmethod
    async def save_plan(self, session_id: str, plan: InterviewPlan) -> None:
        pass

    @abstractmethod
    async def save_message(self, session_id: str, message: Message) -> None:
        """Append a message to the session transcript."""
        pass

    @abstractmethod
    async def save_analysis(self, session_id: str, analysis: InterviewAnalysis) -> None:
        pass

    @abstractmethod
    async def add_cost(self, session_id: str, tokens: int, cost: float) -> None:
        """Add to the session's running token and cost totals."""
        pass
