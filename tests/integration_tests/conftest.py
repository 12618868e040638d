"""Pytest configuration and fixtures for integration tests."""

import os

import pytest

from chapterrelay.config import BackendSettings
from chapterrelay.translators.gemini_translator import GeminiTranslator
from chapterrelay.translators.google_translator import GoogleTranslator


def has_gemini_api_key() -> bool:
    """Check if Gemini API key is available."""
    return bool(os.getenv("GEMINI_API_KEY"))


@pytest.fixture
def gemini_translator() -> GeminiTranslator:
    """
    Provide GeminiTranslator if API key is available.

    Skips the test if GEMINI_API_KEY environment variable is not set.
    """
    if not has_gemini_api_key():
        pytest.skip("Gemini API key not available (set GEMINI_API_KEY)")
    return GeminiTranslator(settings=BackendSettings(provider="gemini"))


@pytest.fixture
def google_translator() -> GoogleTranslator:
    """
    Provide GoogleTranslator for live tests.

    deep-translator needs no key, so the test only runs when network tests are
    explicitly enabled with CHAPTERRELAY_NETWORK_TESTS=1.
    """
    if os.getenv("CHAPTERRELAY_NETWORK_TESTS") != "1":
        pytest.skip("Network tests disabled (set CHAPTERRELAY_NETWORK_TESTS=1)")
    return GoogleTranslator(settings=BackendSettings(provider="google"))
