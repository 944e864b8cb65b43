from __future__ import annotations


class QuizCoreError(Exception):
    """Base class for business errors raised by the attempt core and the catalog."""

    error_code = "quizcore_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(QuizCoreError):
    """A referenced quiz, question, attempt or user does not exist."""

    error_code = "not_found"
    status_code = 404


class PreconditionError(QuizCoreError):
    """A business rule rejects the request (unpublished quiz, wrong role)."""

    error_code = "precondition_failed"
    status_code = 422


class ConflictError(QuizCoreError):
    """The request is stale with respect to the attempt state machine."""

    error_code = "conflict"
    status_code = 409
