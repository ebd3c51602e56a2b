"""Exceptions raised by the climate-jobs services and mapped to HTTP by the routes."""


class ClimateJobsError(Exception):
    """Base class for errors scoped to a single request."""


class ConfigurationError(ClimateJobsError):
    """A required collaborator (Supabase, LLM, OCR) is not configured."""


class ValidationError(ClimateJobsError):
    """Local precondition failure; no collaborator was contacted."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class AuthenticationError(ValidationError):
    """No authenticated user for an operation that needs one."""


class SubmissionError(ClimateJobsError):
    """Storage or persistence failed while saving a work submission."""


class QuestionGenerationError(ClimateJobsError):
    """The LLM could not produce, or we could not store, quiz questions."""
