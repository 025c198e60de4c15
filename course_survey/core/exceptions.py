class SurveyError(Exception):
    """Base error for survey operations.

    ``message`` is safe to show to the end user.
    """

    status_code = 500

    def __init__(self, message: str = "Survey operation failed"):
        super().__init__(message)
        self.message = message


class SessionNotFoundError(SurveyError):
    status_code = 404

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class InvalidSessionStateError(SurveyError):
    status_code = 409

    def __init__(self, session_id: str, status: str, expected: str):
        super().__init__(
            f"Session {session_id} is {status}, expected {expected}"
        )
        self.session_id = session_id
        self.status = status


class InvalidMessageError(SurveyError):
    status_code = 400


class PlanNotFoundError(SurveyError):
    def __init__(self, role: str):
        super().__init__(f"No survey plan registered for role '{role}'")
        self.role = role


class PlanAlreadyAssignedError(SurveyError):
    status_code = 409

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} already has a plan")
        self.session_id = session_id


class LanguageModelError(SurveyError):
    """Raised when the language model call fails or returns nothing."""


class SurveyClientError(SurveyError):
    """A client request failed; ``message`` is shown to the user as an alert."""
