"""A translator that uses Google's Gemini models."""

import logging

from google.genai import types

from chapterrelay.models import TranslationRequest

from .base_genai import BaseGenAITranslator, TranslationList

logger = logging.getLogger(__name__)

_DEFAULT_MAX_OUTPUT_TOKENS = 40000


class GeminiTranslator(BaseGenAITranslator):
    """
    A translator for the Gemini family of models.

    This translator uses 'gemini-2.5-flash' by default, passes the translation
    rules as a system instruction and asks for a schema-constrained JSON
    response.
    """

    def _default_model_name(self) -> str:
        """Return the default model name to use if not specified in settings."""
        return "gemini-2.5-flash"

    def _get_generation_config(self, request: TranslationRequest) -> types.GenerateContentConfig:
        """
        Return the generation configuration for the API call.

        For Gemini, we specify the response MIME type as JSON and set a high
        output token limit so long chapters are not cut off. Fields from the
        backend's `extra` settings are added last and win over these defaults.
        """
        max_tokens = (self.settings.max_output_tokens if self.settings else None) or _DEFAULT_MAX_OUTPUT_TOKENS
        fields = {
            "system_instruction": request.instructions,
            "response_mime_type": "application/json",
            "response_schema": TranslationList,
            "max_output_tokens": max_tokens,
        }
        return types.GenerateContentConfig(**(fields | self._extra_config()))
