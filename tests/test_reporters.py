"""Tests for the reporting classes."""

import unittest

from chapterrelay.models import BatchOutcome, TranslationResult
from chapterrelay.reporters.summary_reporter import SummaryReporter


class TestSummaryReporter(unittest.TestCase):
    """Test suite for the SummaryReporter."""

    def setUp(self) -> None:
        """Set up common test data."""
        self.outcome = BatchOutcome(
            results=[
                TranslationResult(title="a", content="b", translated=True, model="gemini-2.5-flash"),
                TranslationResult(title="c", content="d", translated=True, model="gemini-2.5-flash"),
                TranslationResult(title="e", content="f", translated=True, model="google-translate"),
                TranslationResult(title="g", content="h", translated=False, model="gemini-2.5-flash", error="content_policy_rejected"),
            ],
            success_count=2,
            fail_count=1,
            fallback_count=1,
        )
        self.reporter = SummaryReporter()

    def test_generate_logs_totals(self) -> None:
        """1. Totals: Item, success, fallback and failure counts are logged."""
        with self.assertLogs("chapterrelay.reporters.summary_reporter", level="INFO") as cm:
            self.reporter.generate(self.outcome, elapsed=2.5)

        output = "\n".join(cm.output)
        assert "Total items processed: 4" in output
        assert "Translated by ranked backends: 2" in output
        assert "Translated by last resort: 1" in output
        assert "Kept original: 1" in output
        assert "Elapsed time: 2.5s" in output

    def test_generate_logs_model_usage_and_errors(self) -> None:
        """2. Breakdown: Translated items per backend and failures per error kind are logged."""
        with self.assertLogs("chapterrelay.reporters.summary_reporter", level="INFO") as cm:
            self.reporter.generate(self.outcome)

        output = "\n".join(cm.output)
        assert "Items by 'gemini-2.5-flash': 2" in output
        assert "Items by 'google-translate': 1" in output
        assert "WARNING:chapterrelay.reporters.summary_reporter:  - Failures with content_policy_rejected: 1" in output
        assert "Elapsed time" not in output

    def test_generate_empty_outcome(self) -> None:
        """3. Empty: An empty run is reported without breakdown lines."""
        with self.assertLogs("chapterrelay.reporters.summary_reporter", level="INFO") as cm:
            self.reporter.generate(BatchOutcome())

        assert not any("Items by" in line or "Failures with" in line for line in cm.output)
