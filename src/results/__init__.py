"""Reading and writing batches of classification results."""

from .store import ResultLoadOutcome, ResultStore

__all__ = ["ResultStore", "ResultLoadOutcome"]
