"""Manages the overall ChapterRelay translation workflow."""

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .config import RelayConfig
from .fallback import FallbackChain
from .limiter import ConcurrencyLimiter
from .models import BatchOutcome, BatchState, TranslationItem, TranslationRequest
from .orchestrator import BatchOrchestrator
from .prompts import build_instructions
from .reporters import SummaryReporter
from .sources import fetch_items, persist, result_path_for
from .translators import BaseTranslator, build_translator

logger = logging.getLogger(__name__)


@dataclass
class Backends:
    """The translators of one run: ranked backends plus the optional last resort."""

    ranked: list[BaseTranslator]
    last_resort: BaseTranslator | None = None


def build_backends(config: RelayConfig) -> Backends:
    """
    Instantiate the configured backends, skipping any that cannot be initialized.

    Raises:
        ValueError: If no backend at all could be initialized.

    """
    ranked: list[BaseTranslator] = []
    for settings in config.ranked_backends():
        translator = build_translator(settings)
        if translator is not None:
            ranked.append(translator)
            logger.debug("Backend '%s' initialized.", translator.name)

    last_resort = build_translator(config.last_resort) if config.last_resort else None

    if not ranked and last_resort is None:
        msg = "CRITICAL: Could not initialize any translation backend. Check the configuration and API keys."
        raise ValueError(msg)

    logger.info(
        "Fallback chain: %s%s",
        " -> ".join(translator.name for translator in ranked) or "(no ranked backends)",
        f" -> {last_resort.name} (last resort)" if last_resort else "",
    )
    return Backends(ranked=ranked, last_resort=last_resort)


async def translate_batch(
    items: Sequence[TranslationItem],
    config: RelayConfig,
    *,
    backends: Backends | None = None,
) -> BatchOutcome:
    """
    Translate items with the fallback chain described by `config`.

    Every call gets a fresh `BatchState`, limiter and chain, so concurrent
    runs do not share a sticky backend.

    Args:
        items: The items to translate.
        config: The run configuration.
        backends: Prebuilt backends to use instead of building them from `config`.

    Returns:
        The results in input order, with success and failure counts.

    """
    backends = backends or build_backends(config)
    state = BatchState(batch_size=config.batch_size)
    request = TranslationRequest(
        target_language=config.target_lang,
        source_language=config.source_lang,
        instructions=build_instructions(config.target_lang, config.source_lang, config.instructions),
    )
    chain = FallbackChain(
        backends.ranked,
        request,
        state,
        last_resort=backends.last_resort,
        limiter=ConcurrencyLimiter(config.concurrency_limit),
        call_timeout=config.call_timeout,
        transient_retries=config.transient_retries,
        last_resort_attempts=config.last_resort_attempts,
        retry_delay=config.retry_delay,
        retry_backoff_factor=config.retry_backoff_factor,
        last_resort_chunk_size=config.last_resort_chunk_size,
    )
    orchestrator = BatchOrchestrator(
        chain,
        state,
        min_batch_size=config.min_batch_size,
        max_chunk_size=config.max_chunk_size,
        concurrent=config.concurrent,
        stagger_interval=config.stagger_interval,
    )

    started = time.monotonic()
    outcome = await orchestrator.run(items)
    SummaryReporter().generate(outcome, elapsed=time.monotonic() - started)
    return outcome


async def run_job(source: str, output_dir: str | Path, config: RelayConfig) -> Path:
    """
    Fetch items from `source`, translate them and save the results.

    Returns:
        The path of the written result file.

    Raises:
        SourceFetchError: If the source cannot be fetched; this aborts the run.

    """
    items = await fetch_items(source)
    outcome = await translate_batch(items, config)
    return persist(outcome.results, result_path_for(source, output_dir))
