TRANSCRIPT_FETCH_ERROR = "TRANSCRIPT_FETCH_ERROR"


class AnalysisError(Exception):
    """Base class for every error raised by the analysis pipeline."""


class InvalidUrlError(AnalysisError):
    """Raised when no 11 character video ID can be extracted from a URL."""

    def __init__(self, video_url: str):
        self.video_url = video_url
        super().__init__(f"Could not extract video ID from URL: {video_url}")


class MissingConfigurationError(AnalysisError):
    """Raised when a required API key is not configured."""

    def __init__(self, env_var: str, service_name: str):
        self.env_var = env_var
        self.service_name = service_name
        super().__init__(f"Server configuration error: Missing {service_name} API key")

    @property
    def troubleshooting(self) -> str:
        return f"Add {self.env_var} to your environment variables"


class MetadataFetchError(AnalysisError):
    """Raised inside the metadata fetcher. Never escapes it."""


class TranscriptFetchError(AnalysisError):
    """Raised when the transcript provider fails or reports failure."""

    code = TRANSCRIPT_FETCH_ERROR


class SummarizationError(AnalysisError):
    """Raised when the LLM provider fails to produce a completion."""
