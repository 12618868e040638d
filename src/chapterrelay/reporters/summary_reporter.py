"""A reporter for generating concise run summaries."""

import logging
from collections import Counter

from chapterrelay.models import BatchOutcome

logger = logging.getLogger(__name__)


class SummaryReporter:
    """Generates a concise summary of a translation run and logs it."""

    def generate(self, outcome: BatchOutcome, *, elapsed: float | None = None) -> None:
        """Log a summary of the run to the console."""
        logger.info("--- Translation Run Summary ---")
        logger.info("Total items processed: %d", outcome.total)
        logger.info("  - Translated by ranked backends: %d", outcome.success_count)
        logger.info("  - Translated by last resort: %d", outcome.fallback_count)
        logger.info("  - Kept original: %d", outcome.fail_count)

        model_usage = Counter(result.model for result in outcome.results if result.translated and result.model)
        for model, count in model_usage.most_common():
            logger.info("  - Items by '%s': %d", model, count)

        errors = Counter(result.error for result in outcome.results if result.error)
        for error, count in errors.most_common():
            logger.warning("  - Failures with %s: %d", error, count)

        if elapsed is not None:
            logger.info("Elapsed time: %.1fs", elapsed)
        logger.info("-------------------------------")
