"""Exception hierarchy shared by the analysis client, session and store."""

from __future__ import annotations

GENERIC_FAILURE_MESSAGE = "Failed to generate analysis. The API returned an invalid response."


class NewsLensError(Exception):
    """Base class for every error raised by this package."""


class InputValidationError(NewsLensError):
    """User input rejected before anything is sent to the model."""


class SubmissionInProgressError(NewsLensError):
    """A second submission was attempted while one is still in flight."""


class AnalysisError(NewsLensError):
    """Any failure of the analysis call.

    ``user_message`` is what may be shown to the user; the provider's own error
    text only ever goes to the log.
    """

    def __init__(self, detail: str, user_message: str = GENERIC_FAILURE_MESSAGE) -> None:
        super().__init__(detail)
        self.user_message = user_message


class TransportError(AnalysisError):
    """The provider could not be reached or rejected the request."""


class SchemaError(AnalysisError):
    """The response was empty, not JSON, or failed field/range checks."""


class AnalysisCancelledError(AnalysisError):
    def __init__(self, detail: str = "analysis cancelled") -> None:
        super().__init__(detail, user_message="Analysis cancelled.")


class PersistenceWriteError(NewsLensError):
    """A local store write failed. Never fatal to a completed analysis."""
