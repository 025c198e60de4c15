from typing import Optional, Sequence, Tuple

import structlog

from ..application.interview_session import (
    InterviewAnalysis,
    InterviewPlan,
    Message,
    MessageRole,
)
from ..core.config import Settings, get_settings
from ..core.exceptions import LanguageModelError
from ..core.interfaces import LanguageModel
from .json_extractor import JSONExtractor

logger = structlog.get_logger(__name__)

INCOMPLETE_ANALYSIS = InterviewAnalysis(
    summary="Survey was started but not completed. No responses were provided.",
    key_insights=["Survey incomplete - no responses recorded"],
    recommendations=["Complete the survey by responding to the questions"],
)

MINIMAL_ENGAGEMENT_ANALYSIS = InterviewAnalysis(
    summary="Survey was briefly started but ended early with minimal engagement.",
    key_insights=[
        "Survey incomplete - only minimal responses provided",
        "Insufficient data to create a student profile",
    ],
    recommendations=["Continue the survey to share your background and goals"],
)

FALLBACK_ANALYSIS = InterviewAnalysis(
    summary="Survey completed. The conversation explored the student's background and goals for BADM554.",
    key_insights=["Survey completed successfully"],
)

# Sessions with this many user messages or fewer get the fixed minimal analysis.
MINIMAL_ENGAGEMENT_RESPONSES = 2


def format_history(messages: Sequence[Message]) -> str:
    return "\n".join(f"{m.role.value}: {m.content}" for m in messages)


def conversation_context(messages: Sequence[Message], limit: int) -> str:
    """Render the last ``limit`` non-system messages as ``role: content`` lines."""
    visible = [m for m in messages if m.role != MessageRole.SYSTEM]
    return format_history(visible[-limit:] if limit > 0 else [])


class PromptOrchestrator:
    """Builds survey prompts, calls the language model and interprets replies.

    Every pipeline returns its result together with the tokens it consumed.
    Follow-up and wrap-up failures propagate as ``LanguageModelError``;
    analysis never raises and degrades to a fixed analysis instead.
    """

    def __init__(
        self,
        model: LanguageModel,
        settings: Optional[Settings] = None,
        extractor: Optional[JSONExtractor] = None,
    ):
        self.model = model
        self.settings = settings or get_settings()
        self.extractor = extractor or JSONExtractor()

    @property
    def model_name(self) -> str:
        return getattr(self.model, "model_name", self.settings.AI_MODEL)

    async def generate_follow_up(
        self,
        plan: InterviewPlan,
        history: Sequence[Message],
        current_message: str,
    ) -> Tuple[str, int]:
        """Next assistant question, used verbatim as the reply."""
        prompt = self._create_follow_up_prompt(plan, history, current_message)
        completion = await self.model.invoke(prompt)
        return self._require_content(completion.content), completion.token_usage

    async def generate_wrap_up(
        self,
        history: Sequence[Message],
        current_message: str,
    ) -> Tuple[str, int]:
        """Closing message that thanks the student and invites final remarks."""
        prompt = self._create_wrap_up_prompt(history, current_message)
        completion = await self.model.invoke(prompt)
        return self._require_content(completion.content), completion.token_usage

    async def analyze(
        self,
        plan: InterviewPlan,
        transcript: Sequence[Message],
    ) -> Tuple[InterviewAnalysis, int]:
        user_responses = [m for m in transcript if m.role == MessageRole.USER]

        if not user_responses:
            return INCOMPLETE_ANALYSIS, 0
        if len(user_responses) <= MINIMAL_ENGAGEMENT_RESPONSES:
            return MINIMAL_ENGAGEMENT_ANALYSIS, 0

        prompt = self._create_analysis_prompt(plan, transcript)
        try:
            completion = await self.model.invoke(prompt)
        except Exception as e:
            logger.warning("analysis_generation_failed", error=str(e))
            return FALLBACK_ANALYSIS, 0

        try:
            analysis = self.extractor.extract_to_model(completion.content, InterviewAnalysis)
        except Exception as e:
            logger.warning("analysis_decode_failed", error=repr(e))
            analysis = None
        if analysis is None:
            logger.warning("analysis_unparsable", response_length=len(completion.content or ""))
            return FALLBACK_ANALYSIS, completion.token_usage

        return analysis, completion.token_usage

    @staticmethod
    def _require_content(content: str) -> str:
        """Return the reply verbatim; a blank reply is an error."""
        if not content or not content.strip():
            raise LanguageModelError("Language model returned an empty reply")
        return content

    def _create_follow_up_prompt(
        self,
        plan: InterviewPlan,
        history: Sequence[Message],
        current_message: str,
    ) -> str:
        focus_areas = "\n".join(f"- {area}" for area in plan.focus_areas)
        history_context = conversation_context(history, self.settings.FOLLOW_UP_CONTEXT_MESSAGES)

        return f"""You are having a natural conversation with an incoming student for BADM554 Enterprise Database Management (Spring 2026). Your goal is to understand their background - not to run through a checklist.

Topics to explore (in whatever order feels natural):
{focus_areas}

Conversation so far:
{history_context}

Student just said: "{current_message}"

CRITICAL - Be a real conversationalist, not a form:
- If their answer is vague or short (like "a little" or "some" or "not much"), DIG DEEPER. Ask what specifically? When? What did they do?
- If they mention something interesting, follow up on THAT - don't just move to the next topic.
- NEVER start with "It's great to hear" or "That's great" or similar. Vary your responses.
- Sometimes just ask your question directly without any preamble.
- React authentically - if something is surprising or interesting, say so briefly.
- You can be curious, even playful. This isn't a job interview.

Examples of good follow-ups to short answers:
- "SQL" -> "What kinds of queries have you written? Simple SELECTs, or more complex stuff with joins and subqueries?"
- "A little" -> "Tell me more - what did that look like?"
- "Not really" -> "No worries at all. What about [related thing]?"

Ask ONE question. Keep your response to 1-2 sentences total. Be human."""

    def _create_wrap_up_prompt(self, history: Sequence[Message], current_message: str) -> str:
        history_context = conversation_context(history, self.settings.WRAP_UP_CONTEXT_MESSAGES)

        return f"""You are wrapping up a pre-course survey for BADM554 Enterprise Database Management with a student.

Previous conversation:
{history_context}

Their latest response: {current_message}

Your task: Write a brief, warm closing message that:
1. Acknowledges their final response (1 sentence)
2. Thanks them for sharing their background and goals
3. Expresses that their responses will help us tailor the course
4. Asks if there's anything else they'd like to add before we finish

Keep it to 2-3 sentences total. Be genuine and welcoming to the course."""

    def _create_analysis_prompt(self, plan: InterviewPlan, transcript: Sequence[Message]) -> str:
        objectives = "\n".join(f"- {objective}" for objective in plan.objectives)
        transcript_text = "\n\n".join(
            f"{m.role.value}: {m.content}" for m in transcript if m.role != MessageRole.SYSTEM
        )

        return f"""Analyze this pre-course survey transcript for BADM554 Enterprise Database Management.

Survey Objectives:
{objectives}

Transcript:
{transcript_text}

IMPORTANT: Base your analysis ONLY on what was actually discussed in the transcript. Do not make assumptions.

Provide a comprehensive student profile as JSON:
{{
  "summary": "A 2-3 sentence summary of this student's background and readiness for the course",
  "keyInsights": ["insight1", "insight2", "insight3", "insight4"],
  "technicalSkillLevel": "Brief assessment of their current technical level (beginner/intermediate/advanced) with specifics",
  "priorExperienceProfile": "Summary of their relevant prior experience with databases and data",
  "areasNeedingSupport": ["area1", "area2"],
  "topicsOfInterest": ["topic1", "topic2"],
  "recommendations": ["How to best support this student", "Suggested resources or approaches"]
}}

Key Insights: 3-5 main takeaways about this student's background and needs
Areas Needing Support: Specific topics where they may need extra help
Topics of Interest: What they're most excited to learn
Recommendations: How the instructor can best support this student"""
