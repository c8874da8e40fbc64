import os
from typing import Optional

from yt_analysis.errors import SummarizationError
from yt_analysis.llm_providers import LLMProvider

MAX_TRANSCRIPT_CHARS = 15000
TRUNCATION_MARKER = "..."

PROMPTS_DIR = os.path.join(os.path.dirname(__file__), "prompts")


def read_prompt(filename: str) -> str:
    """Helper function to read a prompt file shipped with the package."""
    filepath = os.path.join(PROMPTS_DIR, f"{filename}.md")
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Prompt file not found: {filepath}")
    with open(filepath, "r", encoding="utf-8") as f:
        return f.read()


SYSTEM_PROMPT = read_prompt("framework_system")
USER_PROMPT_TEMPLATE = read_prompt("framework_user")


def truncate_transcript(text: str, limit: int = MAX_TRANSCRIPT_CHARS) -> str:
    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER
    return text


def build_user_prompt(text: str) -> str:
    return USER_PROMPT_TEMPLATE.replace("{{transcript}}", truncate_transcript(text))


class Summarizer:
    """Turns a transcript into the raw framework text generated by the LLM."""

    def __init__(self, provider: LLMProvider, system_prompt: Optional[str] = None):
        self.provider = provider
        self.system_prompt = system_prompt or SYSTEM_PROMPT

    def summarize(self, transcript_text: str) -> str:
        """
        Raises:
            SummarizationError: if the provider fails. No retry is attempted.
        """
        try:
            generated = self.provider.generate_content(self.system_prompt, build_user_prompt(transcript_text))
        except Exception as e:
            raise SummarizationError(str(e)) from e
        return generated or ""
