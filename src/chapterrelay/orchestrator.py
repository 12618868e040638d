"""Drives a list of items through the fallback chain and aggregates the results."""

import asyncio
import logging
from collections.abc import Sequence

from .chunker import chunk_text, rewrap
from .fallback import FallbackChain
from .models import BatchOutcome, BatchState, SegmentResult, TranslationItem, TranslationResult

logger = logging.getLogger(__name__)


def _join_models(*segments: SegmentResult) -> str:
    names = [segment.model for segment in segments if segment.model]
    return ",".join(dict.fromkeys(names))


def _first_error(*segments: SegmentResult) -> str | None:
    for segment in segments:
        if segment.error is not None:
            return segment.error.value
    return None


class BatchOrchestrator:
    """
    Translate items end-to-end and keep the results in input order.

    Titles are short, so they are sent several per request in adaptive
    sub-batches. Contents are translated one item at a time, chunked to stay
    under the backend size limit, either sequentially or concurrently with a
    staggered start.
    """

    def __init__(  # noqa: PLR0913
        self,
        chain: FallbackChain,
        state: BatchState,
        *,
        min_batch_size: int = 1,
        max_chunk_size: int = 4000,
        concurrent: bool = True,
        stagger_interval: float = 0.0,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            chain: The fallback chain used for every translation.
            state: The per-run state; its `batch_size` is the starting sub-batch size.
            min_batch_size: The floor below which a failing sub-batch is not split further.
            max_chunk_size: The maximum content chunk size per call.
            concurrent: Whether item contents are translated concurrently.
            stagger_interval: Start delay per item index in concurrent mode, in seconds.

        """
        self.chain = chain
        self.state = state
        self.min_batch_size = max(1, min_batch_size)
        self.max_chunk_size = max_chunk_size
        self.concurrent = concurrent
        self.stagger_interval = stagger_interval

    async def run(self, items: Sequence[TranslationItem]) -> BatchOutcome:
        """
        Translate all items.

        Returns:
            A BatchOutcome with exactly one result per item, in input order.

        """
        if not items:
            return BatchOutcome()

        logger.info("Translating %d item(s): titles in batches of up to %d, contents %s.", len(items), self.state.batch_size, "concurrently" if self.concurrent else "sequentially")
        titles = await self.translate_titles([item.title for item in items])
        contents = await self.translate_contents([item.content for item in items])

        results: list[TranslationResult] = []
        for title, content in zip(titles, contents, strict=True):
            translated = title.translated and content.translated
            results.append(
                TranslationResult(
                    title=title.text,
                    content=content.text,
                    translated=translated,
                    model=_join_models(title, content),
                    error=None if translated else _first_error(title, content),
                ),
            )
            if not translated:
                self.state.fail_count += 1
            elif title.used_last_resort or content.used_last_resort:
                self.state.fallback_count += 1
            else:
                self.state.success_count += 1

        return BatchOutcome(
            results=results,
            success_count=self.state.success_count,
            fail_count=self.state.fail_count,
            fallback_count=self.state.fallback_count,
        )

    async def translate_titles(self, titles: list[str]) -> list[SegmentResult]:
        """
        Translate titles in adaptive sub-batches.

        A sub-batch whose request fails, or whose answer has the wrong number
        of lines, is retried over the same range at half its own length. At
        the floor size, or once no ranked backend is left, the range falls
        back to per-item translation.
        """
        results: list[SegmentResult | None] = [None] * len(titles)
        pending = [index for index, title in enumerate(titles) if title.strip()]
        for index, title in enumerate(titles):
            if not title.strip():
                results[index] = SegmentResult(text=title, translated=True, model="")

        start = 0
        while start < len(pending):
            if self.chain.exhausted:
                await self._translate_each(titles, pending[start:], results)
                break

            size = self.state.batch_size
            batch = pending[start : start + size]
            batch_texts = [titles[index] for index in batch]
            outcome = await self.chain.translate_combined(batch_texts)

            if outcome.success and len(outcome.texts) == len(batch):
                for index, translation in zip(batch, outcome.texts, strict=True):
                    results[index] = SegmentResult(text=rewrap(titles[index], translation), translated=True, model=outcome.backend)
                logger.info("Translated titles %d-%d of %d with '%s'.", start + 1, start + len(batch), len(pending), outcome.backend)
                start += len(batch)
                continue

            if outcome.success:
                logger.warning("Title batch of %d returned %d line(s) from '%s'.", len(batch), len(outcome.texts), outcome.backend)
            else:
                logger.warning("Title batch of %d failed on '%s' (%s).", len(batch), outcome.backend, outcome.error.value if outcome.error else "error")

            if self.chain.exhausted:
                # The loop head hands the rest to per-item translation.
                continue

            if len(batch) > self.min_batch_size:
                self.state.batch_size = max(self.min_batch_size, len(batch) // 2)
                logger.info("Reducing title batch size to %d and retrying the same range.", self.state.batch_size)
                continue

            await self._translate_each(titles, batch, results)
            start += len(batch)

        return [result for result in results if result is not None]

    async def _translate_each(self, texts: list[str], indexes: list[int], results: list[SegmentResult | None]) -> None:
        for index in indexes:
            results[index] = await self.chain.translate(texts[index])

    async def translate_contents(self, contents: list[str]) -> list[SegmentResult]:
        """Translate every content, sequentially or concurrently, keeping input order."""
        if not self.concurrent:
            return [await self.translate_content(content) for content in contents]

        async def _staggered(index: int, content: str) -> SegmentResult:
            if self.stagger_interval > 0 and index:
                await asyncio.sleep(self.stagger_interval * index)
            return await self.translate_content(content)

        # gather() returns results in argument order regardless of completion order.
        return list(await asyncio.gather(*(_staggered(index, content) for index, content in enumerate(contents))))

    async def translate_content(self, content: str) -> SegmentResult:
        """
        Translate one content, chunk by chunk, and merge the chunks in order.

        The merged result counts as translated only if every chunk was; failed
        chunks keep their original text.
        """
        chunks = chunk_text(content, self.max_chunk_size)
        if len(chunks) > 1:
            logger.debug("Content of %d characters split into %d chunks.", len(content), len(chunks))

        segments = [await self.chain.translate(chunk) for chunk in chunks]
        if not segments:
            return SegmentResult(text=content, translated=True, model="")

        return SegmentResult(
            text="".join(rewrap(chunk, segment.text) if segment.translated else chunk for chunk, segment in zip(chunks, segments, strict=True)),
            translated=all(segment.translated for segment in segments),
            model=_join_models(*segments),
            error=next((segment.error for segment in segments if segment.error is not None), None),
            used_last_resort=any(segment.used_last_resort for segment in segments),
        )
