"""
Translation backend implementations.

Each translator adheres to the `BaseTranslator` interface and can be
dynamically initialized from a `BackendSettings` entry of the configuration.
"""

import logging

from chapterrelay.config import BackendSettings

from .base import BaseTranslator
from .base_genai import BaseGenAITranslator
from .gemini_translator import GeminiTranslator
from .gemma_translator import GemmaTranslator
from .google_translator import GoogleTranslator
from .mock_translator import MockTranslator

logger = logging.getLogger(__name__)

# Central mapping from provider name to translator class.
TRANSLATOR_MAPPING: dict[str, type[BaseTranslator]] = {
    "gemini": GeminiTranslator,
    "gemma": GemmaTranslator,
    "google": GoogleTranslator,
    "mock": MockTranslator,
}


def build_translator(settings: BackendSettings) -> BaseTranslator | None:
    """
    Instantiate a translator class using a dictionary-based factory.

    Args:
        settings: The backend entry from the configuration.

    Returns:
        An initialized translator, or None if the provider is unknown or its
        initialization fails (e.g., a missing API key).

    """
    translator_class = TRANSLATOR_MAPPING.get(settings.provider.lower())
    if not translator_class:
        logger.warning("Unknown translator provider: '%s'", settings.provider)
        return None

    try:
        return translator_class(settings=settings)
    except (ImportError, AttributeError, KeyError, ValueError) as e:
        logger.warning("Could not initialize translator '%s': %s", settings.display_name, e)
        return None


__all__ = [
    "TRANSLATOR_MAPPING",
    "BaseGenAITranslator",
    "BaseTranslator",
    "GeminiTranslator",
    "GemmaTranslator",
    "GoogleTranslator",
    "MockTranslator",
    "build_translator",
]
