# tests/conftest.py
import pytest
from fastapi.testclient import TestClient
import os

from course_survey.core.interfaces import Completion, LanguageModel

class ScriptedLanguageModel(LanguageModel):
    """Returns queued replies in order, recording every prompt it receives."""

    model_name = "gpt-4o"

    def __init__(self, replies=None, token_usage=100):
        self.replies = list(replies or [])
        self.token_usage = token_usage
        self.prompts = []
        self.error = None

    async def invoke(self, prompt: str) -> Completion:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        content = self.replies.pop(0) if self.replies else "What kinds of queries have you written?"
        return Completion(content=content, token_usage=self.token_usage)

@pytest.fixture
def test_env_vars():
    """Set up test environment variables."""
    os.environ["ENVIRONMENT"] = "testing"
    os.environ["DEBUG"] = "true"
    os.environ["APP_NAME"] = "Course Survey Test"
    yield
    # Clean up
    os.environ.pop("ENVIRONMENT", None)
    os.environ.pop("DEBUG", None)
    os.environ.pop("APP_NAME", None)

@pytest.fixture
def settings(test_env_vars):
    """Get test settings."""
    from course_survey.core.config import get_settings
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()

@pytest.fixture
def language_model():
    return ScriptedLanguageModel()

@pytest.fixture
def store():
    from course_survey.application.session_store import InMemorySessionStore
    return InMemorySessionStore()

@pytest.fixture
def orchestrator(language_model, settings):
    from course_survey.managers.interview import PromptOrchestrator
    return PromptOrchestrator(language_model, settings)

@pytest.fixture
def controller(store, orchestrator):
    from course_survey.managers.lifecycle import SessionLifecycleController
    return SessionLifecycleController(store, orchestrator)

@pytest.fixture
def app(settings, store, language_model):
    """Create test app instance."""
    from course_survey.interface.api.main import create_app
    return create_app(store=store, language_model=language_model)

@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)
