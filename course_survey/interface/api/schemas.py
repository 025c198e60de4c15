from pydantic import Field

from ...application.interview_session import (
    InterviewAnalysis,
    InterviewPlan,
    InterviewSession,
    SurveyModel,
)


class StartResponse(SurveyModel):
    session_id: str
    session: InterviewSession
    plan: InterviewPlan


class MessageRequest(SurveyModel):
    session_id: str
    message: str
    is_wrap_up: bool = False


class SessionResponse(SurveyModel):
    session: InterviewSession


class CompleteRequest(SurveyModel):
    session_id: str


class CompleteResponse(SurveyModel):
    session: InterviewSession
    analysis: InterviewAnalysis


class TimingPolicy(SurveyModel):
    target_duration_ms: int = Field(gt=0)
    idle_nudge_ms: int = Field(gt=0)
    min_exchanges_for_completion: int = Field(gt=0)


class ErrorResponse(SurveyModel):
    error: str
