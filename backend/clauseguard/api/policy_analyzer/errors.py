"""Errors raised by the analysis pipeline. Messages are meant to be shown to end users as-is."""


class AnalysisError(Exception):
    """Base class for analysis failures that abort the whole request."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(AnalysisError):
    """Endpoint, model or API key is missing. Raised before any network call."""

    DEFAULT_MESSAGE = "Please configure your API settings (endpoint, model, and API key)."

    def __init__(self, message: str = DEFAULT_MESSAGE) -> None:
        super().__init__(message)


class TransportError(AnalysisError):
    """The LLM endpoint could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
