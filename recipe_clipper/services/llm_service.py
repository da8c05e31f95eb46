from typing import Protocol

import google.generativeai as genai
import logfire

from ..config.settings import Settings, settings as default_settings
from ..exceptions import CompletionError


SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"}
]


class TextCompletionService(Protocol):
    async def complete(self, prompt: str) -> str:
        ...


class GeminiCompletionService:
    """Service for prompting Google Gemini and getting plain text back"""

    def __init__(self, app_settings: Settings = None):
        """Initialize the Gemini client with the API key from settings"""
        self.settings = app_settings or default_settings
        if not self.settings.google_gemini_key:
            raise ValueError("GOOGLE_GEMINI_KEY not found in environment variables")

        genai.configure(api_key=self.settings.google_gemini_key)
        self.model = genai.GenerativeModel(self.settings.gemini_model)

    async def complete(self, prompt: str) -> str:
        """
        Send a prompt to Gemini and return the response text.

        Raises:
            CompletionError: When the call fails, is blocked, or returns nothing
        """
        try:
            response = await self.model.generate_content_async(
                prompt,
                generation_config=genai.types.GenerationConfig(
                    temperature=self.settings.llm_temperature,
                    max_output_tokens=self.settings.llm_max_output_tokens
                ),
                safety_settings=SAFETY_SETTINGS
            )
        except Exception as e:
            logfire.warn("gemini_call_failed", model=self.settings.gemini_model, error=str(e)[:200])
            raise CompletionError(f"Gemini call failed: {e}") from e

        return self._response_text(response)

    def _response_text(self, response) -> str:
        # response.text raises ValueError when the candidate has no parts
        try:
            if response.text:
                return response.text.strip()
        except ValueError:
            pass

        if getattr(response, 'candidates', None):
            candidate = response.candidates[0]
            if getattr(candidate, 'content', None) and candidate.content.parts:
                return candidate.content.parts[0].text.strip()
            raise CompletionError(
                f"Gemini response blocked. Finish reason: {candidate.finish_reason}",
                finish_reason=str(candidate.finish_reason)
            )
        raise CompletionError("Gemini returned empty response")
