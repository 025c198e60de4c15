"""Client side of the survey: timing heuristics and optimistic transcript.

``SurveyClientState`` holds everything the presentation layer tracks
between requests: the start instant, the sticky wrap-up latch, the idle
nudge and the busy flag. It does no I/O, so it can be driven by any UI.
``SurveyClient`` pairs that state with an ``httpx.Client`` talking to the
survey API.
"""
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple

import httpx
import structlog

from ..application.interview_session import (
    InterviewAnalysis,
    InterviewSession,
    Message,
    MessageRole,
    SessionStatus,
)
from ..core.config import Settings, get_settings
from ..core.exceptions import SurveyClientError
from .api.schemas import TimingPolicy

logger = structlog.get_logger(__name__)

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000


def default_policy(settings: Optional[Settings] = None) -> TimingPolicy:
    settings = settings or get_settings()
    return TimingPolicy(
        target_duration_ms=settings.TARGET_DURATION_MS,
        idle_nudge_ms=settings.IDLE_NUDGE_MS,
        min_exchanges_for_completion=settings.MIN_EXCHANGES_FOR_COMPLETION,
    )


def should_wrap_up(elapsed_ms: float, user_message_count: int, policy: TimingPolicy) -> bool:
    return (
        elapsed_ms >= policy.target_duration_ms
        or user_message_count >= policy.min_exchanges_for_completion
    )


@dataclass
class SurveyClientState:
    policy: TimingPolicy
    clock: Clock = monotonic_ms
    session: Optional[InterviewSession] = None
    analysis: Optional[InterviewAnalysis] = None
    started_at: Optional[float] = None
    last_activity: Optional[float] = None
    wrap_up_mode: bool = False
    show_wrap_up_prompt: bool = False
    show_idle_nudge: bool = False
    busy: bool = False
    _pending_wrap_up: bool = field(default=False, init=False, repr=False)

    @property
    def is_interviewing(self) -> bool:
        return self.session is not None and self.session.status == SessionStatus.INTERVIEWING

    def session_started(self, session: InterviewSession) -> None:
        self.session = session
        self.started_at = self.clock()
        self.last_activity = self.started_at

    def should_wrap_up(self) -> bool:
        if self.started_at is None or self.session is None:
            return False
        elapsed = self.clock() - self.started_at
        return should_wrap_up(elapsed, self.session.user_message_count, self.policy)

    def begin_send(self, text: str) -> Tuple[str, bool]:
        """Optimistically append the user's message and decide wrap-up.

        Returns the trimmed text and the ``isWrapUp`` flag for the request.
        """
        if self.session is None:
            raise SurveyClientError("No survey in progress")
        if self.busy:
            raise SurveyClientError("Please wait for the current request to finish")
        text = text.strip()
        if not text:
            raise SurveyClientError("Message must not be empty")

        enter_wrap_up = not self.wrap_up_mode and self.should_wrap_up()
        if enter_wrap_up:
            self.wrap_up_mode = True

        self.busy = True
        self.show_idle_nudge = False
        self._pending_wrap_up = enter_wrap_up
        self.session.transcript.append(Message(role=MessageRole.USER, content=text))
        return text, enter_wrap_up

    def send_succeeded(self, session: InterviewSession) -> None:
        self.session = session
        if self._pending_wrap_up:
            self.show_wrap_up_prompt = True
        self._finish_request()

    def send_failed(self) -> None:
        """Roll back the optimistic message and any wrap-up latched by it."""
        if self.session is not None and self.session.transcript:
            self.session.transcript.pop()
        if self._pending_wrap_up:
            self.wrap_up_mode = False
        self._finish_request()

    def survey_completed(self, session: InterviewSession, analysis: InterviewAnalysis) -> None:
        self.session = session
        self.analysis = analysis
        self.show_wrap_up_prompt = False
        self.show_idle_nudge = False

    def record_activity(self) -> None:
        """Keystroke or other user activity; hides the idle nudge."""
        self.last_activity = self.clock()
        self.show_idle_nudge = False

    def check_idle(self) -> bool:
        """Raise the idle nudge once the idle window has passed.

        Only applies while interviewing with no request in flight. The
        nudge is advisory and never changes the session.
        """
        if not self.is_interviewing or self.busy or self.last_activity is None:
            return False
        if self.clock() - self.last_activity >= self.policy.idle_nudge_ms:
            self.show_idle_nudge = True
        return self.show_idle_nudge

    def dismiss_wrap_up_prompt(self) -> None:
        self.show_wrap_up_prompt = False

    def reset(self) -> None:
        self.session = None
        self.analysis = None
        self.started_at = None
        self.last_activity = None
        self.wrap_up_mode = False
        self.show_wrap_up_prompt = False
        self.show_idle_nudge = False
        self.busy = False
        self._pending_wrap_up = False

    def _finish_request(self) -> None:
        self.busy = False
        self._pending_wrap_up = False
        self.last_activity = self.clock()


def render_transcript(session: InterviewSession) -> str:
    """Transcript as shown to the student; system messages are hidden."""
    lines = []
    for message in session.transcript:
        if message.role == MessageRole.SYSTEM:
            continue
        speaker = "You" if message.role == MessageRole.USER else "Survey"
        lines.append(f"{speaker}: {message.content}")
    return "\n\n".join(lines)


class SurveyClient:
    def __init__(
        self,
        http: httpx.Client,
        policy: Optional[TimingPolicy] = None,
        clock: Clock = monotonic_ms,
        api_prefix: Optional[str] = None,
    ):
        self.http = http
        self.api_prefix = api_prefix if api_prefix is not None else get_settings().API_PREFIX
        self.state = SurveyClientState(policy=policy or default_policy(), clock=clock)

    def fetch_policy(self) -> TimingPolicy:
        data = self._request("GET", "/interview/config", None, "Failed to load survey settings.")
        self.state.policy = TimingPolicy.model_validate(data)
        return self.state.policy

    def start(self) -> InterviewSession:
        self.state.busy = True
        try:
            data = self._request(
                "POST", "/interview/start", {"role": "student"}, "Failed to start survey. Please try again."
            )
        finally:
            self.state.busy = False
        session = InterviewSession.model_validate(data["session"])
        self.state.session_started(session)
        return session

    def send(self, text: str) -> InterviewSession:
        text, is_wrap_up = self.state.begin_send(text)
        payload = {
            "sessionId": self.state.session.id,
            "message": text,
            "isWrapUp": is_wrap_up,
        }
        try:
            data = self._request("POST", "/interview/message", payload, "Failed to send message. Please try again.")
            session = InterviewSession.model_validate(data["session"])
        except Exception:
            self.state.send_failed()
            raise
        self.state.send_succeeded(session)
        return session

    def complete(self) -> InterviewAnalysis:
        if self.state.session is None:
            raise SurveyClientError("No survey in progress")
        self.state.busy = True
        try:
            data = self._request(
                "POST",
                "/interview/complete",
                {"sessionId": self.state.session.id},
                "Failed to complete survey. Please try again.",
            )
        finally:
            self.state.busy = False
        session = InterviewSession.model_validate(data["session"])
        analysis = InterviewAnalysis.model_validate(data["analysis"])
        self.state.survey_completed(session, analysis)
        return analysis

    def start_new(self) -> None:
        self.state.reset()

    def _request(self, method: str, path: str, payload: Optional[dict], alert: str) -> dict:
        try:
            response = self.http.request(method, f"{self.api_prefix}{path}", json=payload)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("survey_request_failed", method=method, path=path, error=str(e))
            raise SurveyClientError(alert) from e
