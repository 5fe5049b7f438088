"""Batch evaluation of classification results."""

from .summary import ClassificationSummary, summarize

__all__ = ["ClassificationSummary", "summarize"]
