"""A mock translator for testing and dry runs."""

import asyncio
import logging
from collections import deque
from collections.abc import Iterable

from chapterrelay.config import BackendSettings
from chapterrelay.models import TranslationRequest

from .base import BaseTranslator

logger = logging.getLogger(__name__)


class MockTranslatorError(Exception):
    """Custom exception for mock translator errors."""


class MockTranslator(BaseTranslator):
    """
    A mock translator that prepends a '[MOCK]' prefix.

    It can be scripted to fail, to drop the last translation of large batches
    (as a truncated model response would), or to take time, and it records
    every call it receives.
    """

    default_name = "mock"

    def __init__(  # noqa: PLR0913
        self,
        settings: BackendSettings | None = None,
        *,
        return_error: bool = False,
        error: BaseException | None = None,
        failures: Iterable[BaseException] = (),
        max_batch_items: int | None = None,
        delay: float = 0.0,
    ) -> None:
        """
        Initialize the Mock Translator.

        Args:
            settings: Backend settings; only `name` is used.
            return_error: If True, every call raises MockTranslatorError.
            error: If given, every call raises this exception.
            failures: Exceptions raised by the first calls, one per call, before normal behavior resumes.
            max_batch_items: Requests with more texts than this get one translation fewer back.
            delay: Seconds to sleep inside each call.

        """
        super().__init__(settings)
        self.return_error = return_error
        self.error = error
        self.failures: deque[BaseException] = deque(failures)
        self.max_batch_items = max_batch_items
        self.delay = delay
        self.calls: list[list[str]] = []
        self.active_calls = 0
        self.peak_active_calls = 0

    async def translate(self, texts: list[str], request: TranslationRequest) -> list[str]:
        """
        Prepend '[MOCK] ' to each text to simulate translation.

        Raises:
            MockTranslatorError: If `return_error` was set.
            BaseException: The next scripted failure, or the configured `error`.

        """
        self.calls.append(list(texts))
        self.active_calls += 1
        self.peak_active_calls = max(self.peak_active_calls, self.active_calls)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.failures:
                raise self.failures.popleft()
            if self.error is not None:
                raise self.error
            if self.return_error:
                msg = "Mock translator was configured to fail."
                raise MockTranslatorError(msg)
        finally:
            self.active_calls -= 1

        translations = [f"[MOCK] {text.strip()}" for text in texts]
        if self.max_batch_items is not None and len(texts) > self.max_batch_items:
            translations = translations[:-1]

        logger.debug("MockTranslator processed %d texts for target '%s'.", len(texts), request.target_language)
        return translations
