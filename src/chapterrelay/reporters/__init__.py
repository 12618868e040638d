"""Reporters that summarize a translation run."""

from .summary_reporter import SummaryReporter

__all__ = ["SummaryReporter"]
