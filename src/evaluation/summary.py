"""Aggregate metrics over a batch of classification results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

import numpy as np
from sklearn.metrics import confusion_matrix, precision_recall_fscore_support

from src.models.result import ClassificationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationSummary:
    """Metrics computed from a batch of trials.

    Rows of ``confusion_matrix`` are true labels and columns are predicted
    labels, both in ``class_labels`` order.
    """

    total: int
    correct: int
    accuracy: float
    class_labels: List[int] = field(default_factory=list)
    confusion_matrix: List[List[int]] = field(default_factory=list)
    precision: Dict[int, float] = field(default_factory=dict)
    recall: Dict[int, float] = field(default_factory=dict)
    f_measure: Dict[int, float] = field(default_factory=dict)
    rejected: int = 0
    rejection_rate: float = 0.0
    post_processing_changes: int = 0
    mean_maximum_likelihood: float = 0.0
    invalid: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "correct": self.correct,
            "accuracy": self.accuracy,
            "class_labels": list(self.class_labels),
            "confusion_matrix": [list(row) for row in self.confusion_matrix],
            "precision": {str(label): value for label, value in self.precision.items()},
            "recall": {str(label): value for label, value in self.recall.items()},
            "f_measure": {str(label): value for label, value in self.f_measure.items()},
            "rejected": self.rejected,
            "rejection_rate": self.rejection_rate,
            "post_processing_changes": self.post_processing_changes,
            "mean_maximum_likelihood": self.mean_maximum_likelihood,
            "invalid": self.invalid,
        }


def summarize(
    results: Sequence[ClassificationResult],
    null_class_label: int = 0,
    strict: bool = False,
    tolerance: float = 1e-6,
) -> ClassificationSummary:
    """Summarize ``results``.

    With ``strict`` the first inconsistent record raises
    :class:`ClassificationResultError`; otherwise problems are logged and
    counted in ``invalid``.
    """

    invalid = 0
    for idx, result in enumerate(results):
        if strict:
            result.validate(tolerance=tolerance)
            continue
        found = result.problems(tolerance=tolerance)
        if found:
            invalid += 1
            logger.warning("Result %d is inconsistent: %s", idx, "; ".join(found))

    total = len(results)
    if total == 0:
        return ClassificationSummary(total=0, correct=0, accuracy=0.0, invalid=invalid)

    y_true = np.array([result.true_label for result in results])
    y_pred = np.array([result.predicted_label for result in results])
    y_raw = np.array([result.raw_predicted_label for result in results])

    correct = int(np.sum(y_true == y_pred))
    labels = sorted({int(label) for label in np.concatenate([y_true, y_pred])})

    matrix = confusion_matrix(y_true, y_pred, labels=labels)
    precision, recall, f_measure, _support = precision_recall_fscore_support(
        y_true, y_pred, labels=labels, average=None, zero_division=0
    )

    rejected = int(np.sum((y_pred == null_class_label) & (y_raw != null_class_label)))
    likelihoods = np.array([result.maximum_likelihood for result in results], dtype=float)

    summary = ClassificationSummary(
        total=total,
        correct=correct,
        accuracy=correct / total,
        class_labels=labels,
        confusion_matrix=matrix.astype(int).tolist(),
        precision={label: float(value) for label, value in zip(labels, precision)},
        recall={label: float(value) for label, value in zip(labels, recall)},
        f_measure={label: float(value) for label, value in zip(labels, f_measure)},
        rejected=rejected,
        rejection_rate=rejected / total,
        post_processing_changes=int(np.sum(y_pred != y_raw)),
        mean_maximum_likelihood=float(np.mean(likelihoods)),
        invalid=invalid,
    )
    logger.debug("Summarized %d results: accuracy=%.4f", total, summary.accuracy)
    return summary
