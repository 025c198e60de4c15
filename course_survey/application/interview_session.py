from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SurveyModel(BaseModel):
    """Base for survey records; serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EducationRole(str, Enum):
    STUDENT = "student"


class SessionStatus(str, Enum):
    PLANNING = "planning"
    INTERVIEWING = "interviewing"
    ANALYZING = "analyzing"
    COMPLETED = "completed"


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Message(SurveyModel):
    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=utcnow)


class InterviewPlan(SurveyModel):
    model_config = ConfigDict(frozen=True)

    objectives: List[str]
    questions: List[str] = Field(min_length=1)
    focus_areas: List[str]


class InterviewAnalysis(SurveyModel):
    model_config = ConfigDict(frozen=True)

    summary: str
    key_insights: List[str]
    recommendations: Optional[List[str]] = None
    technical_skill_level: Optional[str] = None
    prior_experience_profile: Optional[str] = None
    areas_needing_support: Optional[List[str]] = None
    topics_of_interest: Optional[List[str]] = None


class SessionCost(SurveyModel):
    tokens: int = 0
    cost: float = 0.0


class InterviewSession(SurveyModel):
    id: str
    topic: str
    role: EducationRole = EducationRole.STUDENT
    status: SessionStatus = SessionStatus.PLANNING
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    transcript: List[Message] = Field(default_factory=list)
    plan: Optional[InterviewPlan] = None
    analysis: Optional[InterviewAnalysis] = None
    cost: Optional[SessionCost] = None

    def messages_with_role(self, role: MessageRole) -> List[Message]:
        return [m for m in self.transcript if m.role == role]

    @property
    def user_message_count(self) -> int:
        return len(self.messages_with_role(MessageRole.USER))
