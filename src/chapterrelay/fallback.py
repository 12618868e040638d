"""Ranked backend fallback with per-failure-class policy."""

import asyncio
import logging
from collections.abc import Sequence

from .chunker import chunk_text, rewrap
from .errors import ErrorKind
from .limiter import ConcurrencyLimiter
from .models import BatchState, SegmentResult, TranslationRequest
from .translators.base import BaseTranslator
from .unit import UnitResult, translate_unit, translate_unit_text

logger = logging.getLogger(__name__)

# Failures worth repeating on the same backend before moving down the chain.
_RETRY_SAME_BACKEND = frozenset({ErrorKind.TRANSIENT_SERVER_ERROR, ErrorKind.MALFORMED_RESPONSE})
_TEXT_SNIPPET_MAX_LENGTH = 40


def _snippet(text: str) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= _TEXT_SNIPPET_MAX_LENGTH else flat[:_TEXT_SNIPPET_MAX_LENGTH] + "..."


class FallbackChain:
    """
    Translate text through ranked backends, degrading gracefully.

    Per call, backends are tried from the sticky index in `state` downwards:

    * success records the backend and makes it the starting point for later calls;
    * `quota_exceeded` moves the sticky index past the backend for the rest of the run;
    * `transient_server_error` and `malformed_response` retry the same backend
      `transient_retries` times before moving on;
    * `content_policy_rejected` stops immediately with the original text, since
      the refusal is about the content and other backends would only burn quota;
    * anything else moves on.

    When every ranked backend has failed, the last resort receives the text in
    small chunks, each retried with exponential backoff. If that fails too the
    original text is returned untranslated.
    """

    def __init__(  # noqa: PLR0913
        self,
        ranked: Sequence[BaseTranslator],
        request: TranslationRequest,
        state: BatchState,
        *,
        last_resort: BaseTranslator | None = None,
        limiter: ConcurrencyLimiter | None = None,
        call_timeout: float | None = None,
        transient_retries: int = 1,
        last_resort_attempts: int = 3,
        retry_delay: float = 2.0,
        retry_backoff_factor: float = 2.0,
        last_resort_chunk_size: int = 4500,
    ) -> None:
        """
        Initialize the chain.

        Args:
            ranked: Backends in the order they should be tried.
            request: Languages and system instructions for every call.
            state: The per-run state holding the sticky backend index.
            last_resort: The backend used after all ranked backends failed.
            limiter: Bounds the number of in-flight backend calls.
            call_timeout: Seconds after which a single call counts as failed.
            transient_retries: Extra attempts on the same backend for transient failures.
            last_resort_attempts: Total attempts per chunk on the last resort.
            retry_delay: Base delay in seconds before a retry.
            retry_backoff_factor: Multiplier applied to the delay after each failed attempt.
            last_resort_chunk_size: Maximum chunk size sent to the last resort.

        """
        if not ranked and last_resort is None:
            msg = "A fallback chain needs at least one backend."
            raise ValueError(msg)
        self.ranked = list(ranked)
        self.request = request
        self.state = state
        self.last_resort = last_resort
        self.limiter = limiter
        self.call_timeout = call_timeout
        self.transient_retries = transient_retries
        self.last_resort_attempts = last_resort_attempts
        self.retry_delay = retry_delay
        self.retry_backoff_factor = retry_backoff_factor
        self.last_resort_chunk_size = last_resort_chunk_size

    @property
    def exhausted(self) -> bool:
        """Return True once no ranked backend is left for this run."""
        return self.state.backend_index >= len(self.ranked)

    @property
    def last_resort_name(self) -> str | None:
        """Return the name of the last resort backend, if one is configured."""
        return self.last_resort.name if self.last_resort else None

    def _make_sticky(self, index: int) -> None:
        if index > self.state.backend_index:
            logger.warning("Backend '%s' is now preferred for the rest of this run.", self.ranked[index].name)
            self.state.backend_index = index

    def _skip_backend(self, index: int) -> None:
        if index + 1 > self.state.backend_index:
            self.state.backend_index = index + 1
            if self.exhausted:
                logger.warning("All ranked backends have exhausted their quota for this run.")
            else:
                logger.warning(
                    "Quota exceeded on '%s'; switching to '%s' for the rest of this run.",
                    self.ranked[index].name,
                    self.ranked[index + 1].name,
                )

    async def _call_ranked(self, translator: BaseTranslator, text: str) -> UnitResult:
        """Call one ranked backend, repeating transient failures a bounded number of times."""
        attempt = 0
        while True:
            result = await translate_unit_text(translator, text, self.request, timeout=self.call_timeout, limiter=self.limiter)
            if result.success or result.error not in _RETRY_SAME_BACKEND or attempt >= self.transient_retries:
                return result
            attempt += 1
            logger.info(
                "Backend '%s' returned %s; retrying (%d/%d).",
                translator.name,
                result.error.value if result.error else "an error",
                attempt,
                self.transient_retries,
            )
            if self.retry_delay > 0:
                await asyncio.sleep(self.retry_delay)

    async def translate(self, text: str) -> SegmentResult:
        """
        Translate one piece of text, falling back as described on the class.

        Returns:
            A SegmentResult. It never raises for backend failures.

        """
        if not text.strip():
            return SegmentResult(text=text, translated=True, model="")

        last_tried: str | None = None
        last_error: ErrorKind | None = None
        index = self.state.backend_index
        while index < len(self.ranked):
            translator = self.ranked[index]
            last_tried = translator.name
            result = await self._call_ranked(translator, text)
            if result.success:
                self._make_sticky(index)
                return SegmentResult(text=result.text, translated=True, model=translator.name)

            last_error = result.error
            if result.error is ErrorKind.CONTENT_POLICY_REJECTED:
                logger.warning("Backend '%s' rejected the content of '%s'; keeping the original text.", translator.name, _snippet(text))
                return SegmentResult(text=text, translated=False, model=translator.name, error=ErrorKind.CONTENT_POLICY_REJECTED)
            if result.error is ErrorKind.QUOTA_EXCEEDED:
                self._skip_backend(index)
            else:
                logger.warning("Backend '%s' failed (%s: %s); falling back.", translator.name, last_error.value if last_error else "error", result.message)
            index += 1

        return await self._translate_with_last_resort(text, last_tried, last_error)

    async def _translate_with_last_resort(self, text: str, last_tried: str | None, last_error: ErrorKind | None) -> SegmentResult:
        if self.last_resort is None:
            logger.error("All backends failed for '%s'; keeping the original text.", _snippet(text))
            return SegmentResult(text=text, translated=False, model=last_tried or "", error=last_error or ErrorKind.OTHER)

        name = self.last_resort.name
        chunks = chunk_text(text, self.last_resort_chunk_size)
        logger.info("Using last resort '%s' for '%s' (%d chunk(s)).", name, _snippet(text), len(chunks))

        translated_chunks: list[str] = []
        for chunk in chunks:
            if not chunk.strip():
                translated_chunks.append(chunk)
                continue
            result = await self._call_last_resort(chunk)
            if not result.success:
                logger.error("Last resort '%s' gave up on '%s'; keeping the original text.", name, _snippet(text))
                return SegmentResult(text=text, translated=False, model=name, error=result.error, used_last_resort=True)
            translated_chunks.append(rewrap(chunk, result.text))

        return SegmentResult(text="".join(translated_chunks), translated=True, model=name, used_last_resort=True)

    async def _call_last_resort(self, chunk: str) -> UnitResult:
        """Call the last resort for one chunk with bounded retries and exponential backoff."""
        if self.last_resort is None:
            msg = "No last resort backend is configured."
            raise RuntimeError(msg)

        result = UnitResult(success=False, backend=self.last_resort.name, error=ErrorKind.OTHER)
        for attempt in range(1, self.last_resort_attempts + 1):
            result = await translate_unit_text(self.last_resort, chunk, self.request, timeout=self.call_timeout, limiter=self.limiter)
            if result.success:
                return result
            if attempt < self.last_resort_attempts:
                delay = self.retry_delay * self.retry_backoff_factor ** (attempt - 1)
                logger.warning(
                    "Last resort '%s' failed (%s), attempt %d/%d; retrying in %.1fs.",
                    self.last_resort.name,
                    result.error.value if result.error else "error",
                    attempt,
                    self.last_resort_attempts,
                    delay,
                )
                await asyncio.sleep(delay)
        return result

    async def translate_combined(self, texts: list[str]) -> UnitResult:
        """
        Send several texts as one request to the current sticky backend.

        A quota failure moves the sticky index down and the same texts go to
        the next ranked backend. Every other failure is returned as is; the
        caller decides whether to split the request. The count of returned
        translations is not checked here.
        """
        while not self.exhausted:
            index = self.state.backend_index
            translator = self.ranked[index]
            result = await translate_unit(translator, texts, self.request, timeout=self.call_timeout, limiter=self.limiter)
            if result.success or result.error is not ErrorKind.QUOTA_EXCEEDED:
                return result
            self._skip_backend(index)

        return UnitResult(success=False, backend=self.last_resort_name or "", error=ErrorKind.QUOTA_EXCEEDED, message="No ranked backend is left for combined requests.")
