"""Translator implementation using the public Google Translate endpoint."""
# Implementation for the Google Translate web endpoint using deep-translator

import asyncio
import logging

from deep_translator import GoogleTranslator as DeepGoogleTranslator  # type: ignore[import-untyped]
from deep_translator.exceptions import TooManyRequests  # type: ignore[import-untyped]

from chapterrelay.errors import NetworkFailureError, QuotaExceededError
from chapterrelay.models import TranslationRequest

from .base import BaseTranslator

logger = logging.getLogger(__name__)

# Define a constant for the maximum batch size to avoid magic numbers.
_MAX_BATCH_SIZE = 10


class GoogleTranslator(BaseTranslator):
    """
    A non-AI translator using Google Translate via the 'deep-translator' library.

    It ignores the system instructions and has a strict per-request size
    limit, which is why the fallback chain sends it pre-chunked text.
    """

    default_name = "google-translate"

    async def translate(self, texts: list[str], request: TranslationRequest) -> list[str]:
        """
        Translate texts with deep-translator in a worker thread.

        Raises:
            QuotaExceededError: If the endpoint reports too many requests.
            NetworkFailureError: If the request fails for any other reason.
            NotImplementedError: If the batch size is too large for this provider.

        """
        if not texts:
            return []

        # deep-translator's translate_batch is a loop of single blocking requests.
        if len(texts) > _MAX_BATCH_SIZE:
            msg = "The 'google' provider does not support large batches. Use a GenAI provider (e.g., 'gemini') for this task."
            raise NotImplementedError(msg)

        translator = DeepGoogleTranslator(source=request.source_language or "auto", target=request.target_language)
        try:
            translated_texts = await asyncio.to_thread(translator.translate_batch, texts)
        except TooManyRequests as e:
            msg = f"deep-translator (Google) rate limit hit: {e}"
            raise QuotaExceededError(msg) from e
        except Exception as e:
            msg = f"deep-translator (Google) request failed: {e}"
            raise NetworkFailureError(msg) from e

        logger.debug("[%s] Translated %d text(s).", self.name, len(texts))
        return [text or "" for text in translated_texts or []]
