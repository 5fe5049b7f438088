"""Shared dataclasses and type definitions for classification results."""

from .result import ClassificationResult, ClassificationResultError

__all__ = [
    "ClassificationResult",
    "ClassificationResultError",
]
