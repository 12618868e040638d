"""
Live tests against the real translation services.

They need network access; the Gemini test also needs GEMINI_API_KEY.
"""

import asyncio

import pytest

from chapterrelay.fallback import FallbackChain
from chapterrelay.models import BatchState, TranslationRequest
from chapterrelay.prompts import build_instructions
from chapterrelay.translators.gemini_translator import GeminiTranslator
from chapterrelay.translators.google_translator import GoogleTranslator

REQUEST = TranslationRequest(target_language="en", source_language="zh", instructions=build_instructions("en", "zh"))


@pytest.mark.integration
def test_gemini_translates_batch(gemini_translator: GeminiTranslator) -> None:
    """1. Gemini: A small batch comes back with one translation per input."""
    result = asyncio.run(gemini_translator.translate(["你好。", "谢谢！"], REQUEST))
    assert len(result) == 2
    assert all(isinstance(text, str) and text for text in result)


@pytest.mark.integration
def test_google_translates_batch(google_translator: GoogleTranslator) -> None:
    """2. Google: deep-translator returns one translation per input."""
    result = asyncio.run(google_translator.translate(["你好"], REQUEST))
    assert len(result) == 1
    assert result[0]


@pytest.mark.integration
def test_chain_with_live_last_resort(google_translator: GoogleTranslator) -> None:
    """3. Chain: The last resort alone can carry a translation through the chain."""
    chain = FallbackChain([], REQUEST, BatchState(batch_size=1), last_resort=google_translator, retry_delay=1.0)
    result = asyncio.run(chain.translate("今天天气很好。我们去公园吧！"))
    assert result.translated is True
    assert result.model == "google-translate"
