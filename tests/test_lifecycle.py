# tests/test_lifecycle.py
import pytest

from course_survey.application.interview_session import MessageRole, SessionStatus
from course_survey.application.plans import FIXED_TOPIC, get_first_question
from course_survey.core.exceptions import (
    InvalidMessageError,
    InvalidSessionStateError,
    LanguageModelError,
    SessionNotFoundError,
    SurveyError,
)
from course_survey.managers.interview import FALLBACK_ANALYSIS
from course_survey.managers.pricing import calculate_cost

async def answer(controller, session_id, count):
    session = None
    for i in range(count):
        session = await controller.post_message(session_id, f"answer {i}")
    return session

@pytest.mark.asyncio
async def test_start_hydrates_session(controller):
    session, plan = await controller.start()

    assert session.status == SessionStatus.INTERVIEWING
    assert session.topic == FIXED_TOPIC
    assert session.plan == plan
    assert [m.role for m in session.transcript] == [MessageRole.SYSTEM, MessageRole.ASSISTANT]
    assert session.transcript[1].content.endswith(get_first_question())
    assert session.analysis is None

@pytest.mark.asyncio
async def test_start_failure_is_generic(controller, store, monkeypatch):
    async def unavailable(*args, **kwargs):
        raise ConnectionError("store down")

    monkeypatch.setattr(store, "save_plan", unavailable)
    with pytest.raises(SurveyError) as exc_info:
        await controller.start()
    assert exc_info.value.message == "Failed to start survey"

@pytest.mark.asyncio
async def test_post_message_appends_user_and_assistant(controller, language_model):
    session, _ = await controller.start()
    language_model.replies = ["Which program are you in now?"]

    updated = await controller.post_message(session.id, "  I studied finance.  ")

    assert [m.role for m in updated.transcript[-2:]] == [MessageRole.USER, MessageRole.ASSISTANT]
    assert updated.transcript[-2].content == "I studied finance."
    assert updated.transcript[-1].content == "Which program are you in now?"
    assert updated.cost.tokens == 100
    assert updated.cost.cost == pytest.approx(calculate_cost(100, "gpt-4o"))

@pytest.mark.asyncio
async def test_transcript_never_shrinks(controller):
    session, _ = await controller.start()
    lengths = [len(session.transcript)]
    for i in range(4):
        session = await controller.post_message(session.id, f"answer {i}", is_wrap_up=(i == 3))
        lengths.append(len(session.transcript))
    assert lengths == sorted(lengths)
    assert lengths[-1] == 2 + 4 * 2

@pytest.mark.asyncio
async def test_wrap_up_flag_uses_wrap_up_prompt(controller, language_model):
    session, _ = await controller.start()
    await controller.post_message(session.id, "Mostly Excel so far", is_wrap_up=True)

    assert "You are wrapping up a pre-course survey" in language_model.prompts[-1]
    # History excludes the message being answered.
    assert "user: Mostly Excel so far" not in language_model.prompts[-1]

@pytest.mark.asyncio
async def test_cost_accumulates(controller):
    session, _ = await controller.start()
    session = await answer(controller, session.id, 3)
    assert session.cost.tokens == 300

@pytest.mark.asyncio
async def test_empty_message_rejected(controller):
    session, _ = await controller.start()
    with pytest.raises(InvalidMessageError):
        await controller.post_message(session.id, "   ")
    assert len((await controller.get(session.id)).transcript) == 2

@pytest.mark.asyncio
async def test_unknown_session(controller):
    with pytest.raises(SessionNotFoundError):
        await controller.post_message("missing", "hello")
    with pytest.raises(SessionNotFoundError):
        await controller.complete("missing")

@pytest.mark.asyncio
async def test_model_failure_surfaces_as_send_error(controller, language_model):
    session, _ = await controller.start()
    language_model.error = LanguageModelError("timeout")

    with pytest.raises(SurveyError) as exc_info:
        await controller.post_message(session.id, "hello")
    assert exc_info.value.message == "Failed to send message"

@pytest.mark.asyncio
async def test_complete_without_answers(controller):
    session, _ = await controller.start()
    session, analysis = await controller.complete(session.id)

    assert session.status == SessionStatus.COMPLETED
    assert analysis.summary == "Survey was started but not completed. No responses were provided."
    assert session.analysis == analysis

@pytest.mark.asyncio
async def test_complete_with_two_answers_is_minimal(controller, language_model):
    session, _ = await controller.start()
    await answer(controller, session.id, 2)
    prompts_before = len(language_model.prompts)

    session, analysis = await controller.complete(session.id)

    assert analysis.summary == "Survey was briefly started but ended early with minimal engagement."
    assert len(language_model.prompts) == prompts_before

@pytest.mark.asyncio
async def test_complete_with_unparsable_analysis(controller, language_model):
    session, _ = await controller.start()
    await answer(controller, session.id, 3)
    language_model.replies = ["Not JSON at all"]

    session, analysis = await controller.complete(session.id)

    assert session.status == SessionStatus.COMPLETED
    assert analysis == FALLBACK_ANALYSIS

@pytest.mark.asyncio
async def test_complete_survives_model_failure(controller, language_model):
    session, _ = await controller.start()
    await answer(controller, session.id, 3)
    language_model.error = LanguageModelError("down")

    session, analysis = await controller.complete(session.id)

    assert session.status == SessionStatus.COMPLETED
    assert analysis == FALLBACK_ANALYSIS

@pytest.mark.asyncio
async def test_completed_session_rejects_messages(controller):
    session, _ = await controller.start()
    await controller.complete(session.id)

    with pytest.raises(InvalidSessionStateError):
        await controller.post_message(session.id, "one more thing")

@pytest.mark.asyncio
async def test_complete_is_idempotent(controller, language_model):
    session, _ = await controller.start()
    await answer(controller, session.id, 3)
    language_model.replies = ['{"summary": "Solid SQL.", "keyInsights": ["Uses PostgreSQL"]}']

    _, first = await controller.complete(session.id)
    prompts = len(language_model.prompts)
    _, second = await controller.complete(session.id)

    assert second == first
    assert len(language_model.prompts) == prompts

@pytest.mark.asyncio
async def test_round_trip_message(store, controller):
    from course_survey.application.interview_session import Message

    session, _ = await controller.start()
    message = Message(role=MessageRole.USER, content="stored as-is")
    await store.save_message(session.id, message)

    loaded = await store.get_session(session.id)
    assert loaded.transcript[-1] == message
    assert loaded.transcript[-1].timestamp == message.timestamp

@pytest.mark.asyncio
async def test_complete_survives_deeply_nested_analysis(controller, language_model):
    session, _ = await controller.start()
    await answer(controller, session.id, 3)
    language_model.replies = ['{"summary": ' + "[" * 100000 + "]" * 100000 + "}"]

    session, analysis = await controller.complete(session.id)

    assert session.status == SessionStatus.COMPLETED
    assert analysis == FALLBACK_ANALYSIS

@pytest.mark.asyncio
async def test_unexpected_model_error_surfaces_as_send_error(controller, language_model):
    session, _ = await controller.start()
    language_model.error = RuntimeError("socket closed")

    with pytest.raises(SurveyError) as exc_info:
        await controller.post_message(session.id, "hello")
    assert exc_info.value.message == "Failed to send message"

@pytest.mark.asyncio
async def test_plan_is_assigned_once(store, controller):
    from course_survey.application.plans import get_plan
    from course_survey.core.exceptions import PlanAlreadyAssignedError

    session, plan = await controller.start()
    replacement = get_plan().model_copy(update={"objectives": ["something else"]})

    with pytest.raises(PlanAlreadyAssignedError):
        await store.save_plan(session.id, replacement)
    assert (await store.get_session(session.id)).plan == plan
