import logging
from abc import ABC, abstractmethod
from typing import Optional

import google.generativeai as genai
from google.generativeai.types import HarmCategory, HarmBlockThreshold  # For safety settings
from openai import OpenAI

from yt_analysis.config import Settings

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    @abstractmethod
    def generate_content(self, prompt: str, content: str) -> str:
        """
        Generate content based on system prompt and input content.
        Args:
            prompt: System prompt/instructions
            content: Input content to process
        Returns:
            Generated content from LLM
        """
        pass


class GeminiProvider(LLMProvider):
    def __init__(self, api_key: Optional[str], model_name: str) -> None:
        if not api_key:
            raise ValueError("GEMINI_API_KEY environment variable not set.")
        self.model_name = model_name

        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(self.model_name)

        # Transcripts routinely trip the default filters and come back empty.
        self.safety_settings = {
            HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
        }

    def generate_content(self, prompt: str, content: str) -> str:
        # Gemini takes the system prompt inline with the content.
        full_prompt = f"{prompt}\n\n{content}"
        try:
            response = self.model.generate_content(full_prompt, safety_settings=self.safety_settings)
            return response.text
        except Exception as e:
            logger.error(f"Gemini generation error: {e}")
            if hasattr(e, "response") and hasattr(e.response, "prompt_feedback"):
                if e.response.prompt_feedback.block_reason:
                    raise ValueError(
                        f"Content generation blocked. Reason: {e.response.prompt_feedback.block_reason.name}"
                    ) from e
            raise


class OpenAIProvider(LLMProvider):
    """Chat completions against OpenAI or any OpenAI-compatible endpoint such as Groq."""

    def __init__(self, api_key: Optional[str], model_name: Optional[str], base_url: Optional[str] = None):
        if not api_key:
            raise ValueError("API key for the chat completion provider is not set.")
        if not model_name:
            raise ValueError("Model name for the chat completion provider is not set.")
        self.model_name = model_name
        self.base_url = base_url
        self.llm = OpenAI(api_key=api_key, base_url=base_url)

    def generate_content(self, prompt: str, content: str) -> str:
        try:
            response = self.llm.chat.completions.create(
                model=self.model_name,
                messages=[
                    {"role": "system", "content": prompt},
                    {"role": "user", "content": content},
                ],
            )
        except Exception as e:
            logger.error(f"Chat completion error ({self.base_url or 'openai'}): {e}")
            raise

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


def get_llm_provider(settings: Settings) -> LLMProvider:
    provider_name = settings.llm_provider
    logger.info(f"Initializing LLM provider: {provider_name}")
    if provider_name == "groq":
        return OpenAIProvider(settings.groq_api_key, settings.groq_model, settings.groq_base_url)
    elif provider_name == "openai":
        return OpenAIProvider(settings.openai_api_key, settings.openai_model, settings.openai_base_url)
    elif provider_name == "gemini":
        return GeminiProvider(settings.gemini_api_key, settings.gemini_model)
    else:
        raise ValueError(f"Unsupported LLM provider: {provider_name}")
