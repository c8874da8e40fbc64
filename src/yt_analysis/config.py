from typing import Dict, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from yt_analysis.errors import MissingConfigurationError

DEFAULT_GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_GROQ_MODEL = "llama3-70b-8192"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash-exp"
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0

SUPPORTED_LLM_PROVIDERS = ("groq", "openai", "gemini")

# provider name -> (settings attribute, environment variable, display name)
_LLM_KEYS = {
    "groq": ("groq_api_key", "GROQ_API_KEY", "Groq"),
    "openai": ("openai_api_key", "OPENAI_API_KEY", "OpenAI"),
    "gemini": ("gemini_api_key", "GEMINI_API_KEY", "Gemini"),
}


class Settings(BaseSettings):
    """
    Process configuration, read once at startup and passed around explicitly.

    Each field is filled from the upper-case environment variable of the same
    name (``SUPADATA_API_KEY``, ``HTTP_TIMEOUT_SECONDS``, ``PORT``, ...) or
    from a local ``.env`` file.
    """

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore", frozen=True)

    supadata_api_key: Optional[str] = None
    llm_provider: str = "groq"
    groq_api_key: Optional[str] = None
    groq_model: str = DEFAULT_GROQ_MODEL
    groq_base_url: str = DEFAULT_GROQ_BASE_URL
    openai_api_key: Optional[str] = None
    openai_model: Optional[str] = None
    openai_base_url: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    youtube_api_key: Optional[str] = None
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    app_env: str = "production"
    host: str = "0.0.0.0"
    port: int = 5000

    @field_validator("llm_provider")
    @classmethod
    def _known_provider(cls, value: str) -> str:
        value = value.lower()
        if value not in SUPPORTED_LLM_PROVIDERS:
            raise ValueError(f"Unsupported LLM provider: {value}")
        return value

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"

    @property
    def llm_api_key(self) -> Optional[str]:
        attribute, _, _ = _LLM_KEYS[self.llm_provider]
        return getattr(self, attribute)

    def required_keys(self) -> List[tuple]:
        """(value, env var, service name) for every key a request needs."""
        _, env_var, service_name = _LLM_KEYS[self.llm_provider]
        return [
            (self.supadata_api_key, "SUPADATA_API_KEY", "Supadata"),
            (self.llm_api_key, env_var, service_name),
        ]

    def check_required_keys(self) -> None:
        """
        Raises:
            MissingConfigurationError: for the first required key that is unset.
        """
        for value, env_var, service_name in self.required_keys():
            if not value:
                raise MissingConfigurationError(env_var, service_name)

    def environment_report(self) -> Dict[str, object]:
        """Key presence flags for the health check. Never includes key values."""
        return {
            "hasSupadataKey": bool(self.supadata_api_key),
            "hasGroqKey": bool(self.groq_api_key),
            "llmProvider": self.llm_provider,
            "hasLlmKey": bool(self.llm_api_key),
            "hasYoutubeKey": bool(self.youtube_api_key),
        }


def load_settings() -> Settings:
    return Settings()
