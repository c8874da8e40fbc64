import pytest

from yt_analysis.config import Settings
from yt_analysis.metadata import OEMBED_URL
from yt_analysis.transcripts import SUPADATA_TRANSCRIPT_URL

from fakes import FakeHttp, FakeProvider, oembed_ok, transcript_ok

SETTINGS_ENV_VARS = (
    "SUPADATA_API_KEY",
    "LLM_PROVIDER",
    "GROQ_API_KEY",
    "GROQ_MODEL",
    "GROQ_BASE_URL",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "YOUTUBE_API_KEY",
    "HTTP_TIMEOUT_SECONDS",
    "APP_ENV",
    "HOST",
    "PORT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    # Settings reads the process environment; tests start from a blank one.
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings():
    return Settings(supadata_api_key="supadata-test-key", groq_api_key="groq-test-key")


@pytest.fixture
def fake_http():
    return FakeHttp({OEMBED_URL: oembed_ok(), SUPADATA_TRANSCRIPT_URL: transcript_ok()})


@pytest.fixture
def fake_provider():
    return FakeProvider()
