"""
Error taxonomy for the copy generation pipeline.

Every stage error aborts the rest of the pipeline; the orchestrator turns it
into a single user-facing status message.
"""

from typing import Optional


class CopyGeneratorError(Exception):
    """Base class for all pipeline errors."""
    pass


class EmptyResultError(CopyGeneratorError):
    """Raised when the input rows contain none of the recognized sections."""
    pass


class MalformedModelOutputError(CopyGeneratorError):
    """Raised when the model response cannot be recovered as a JSON object."""
    pass


class ExternalServiceError(CopyGeneratorError):
    """Raised when the model endpoint returns a non-success response."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UnexpectedError(CopyGeneratorError):
    """Wraps any other failure raised while the pipeline runs."""
    pass


class GenerationInProgressError(CopyGeneratorError):
    """Raised when a generation is started while another one is running."""
    pass
