"""Dataclass describing the outcome of a single classification trial."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np


class ClassificationResultError(ValueError):
    """Raised when a result record fails its consistency check."""

    def __init__(self, problems: Sequence[str]) -> None:
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "invalid classification result")


@dataclass(slots=True, frozen=True)
class ClassificationResult:
    """Outcome of one classification trial.

    ``predicted_label`` is the output of the full decision pipeline, while
    ``raw_predicted_label`` is what the classifier chose before any
    post-processing. The likelihood and distance vectors are indexed by class
    position. Nothing is validated on construction; see :meth:`problems`.
    """

    true_label: int = 0
    predicted_label: int = 0
    raw_predicted_label: int = 0
    maximum_likelihood: float = 0.0
    class_likelihoods: Tuple[float, ...] = field(default_factory=tuple)
    class_distances: Tuple[float, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Own private copies of the vectors.
        object.__setattr__(self, "maximum_likelihood", float(self.maximum_likelihood))
        object.__setattr__(self, "class_likelihoods", tuple(float(v) for v in self.class_likelihoods))
        object.__setattr__(self, "class_distances", tuple(float(v) for v in self.class_distances))

    def is_correct_prediction(self) -> bool:
        return self.true_label == self.predicted_label

    def copy(self) -> "ClassificationResult":
        return dataclasses.replace(self)

    def replace(self, **changes: Any) -> "ClassificationResult":
        """Return a new record with ``changes`` applied on top of this one."""

        return dataclasses.replace(self, **changes)

    def problems(self, tolerance: float = 1e-6) -> List[str]:
        """List consistency problems; an empty list means the record is sound."""

        found: List[str] = []
        for name in ("true_label", "predicted_label", "raw_predicted_label"):
            value = getattr(self, name)
            if value < 0:
                found.append(f"{name} must not be negative (got {value})")

        likelihood = self.maximum_likelihood
        if not math.isfinite(likelihood):
            found.append(f"maximum_likelihood is not finite (got {likelihood})")
        elif not 0.0 <= likelihood <= 1.0:
            found.append(f"maximum_likelihood outside [0, 1] (got {likelihood})")

        n_likelihoods = len(self.class_likelihoods)
        n_distances = len(self.class_distances)
        if n_likelihoods and n_distances and n_likelihoods != n_distances:
            found.append(
                f"class_likelihoods has {n_likelihoods} entries but class_distances has {n_distances}"
            )

        if n_likelihoods and math.isfinite(likelihood):
            best = max(self.class_likelihoods)
            if abs(best - likelihood) > tolerance:
                found.append(f"maximum_likelihood {likelihood} does not match max(class_likelihoods) {best}")
        return found

    def validate(self, tolerance: float = 1e-6) -> "ClassificationResult":
        found = self.problems(tolerance=tolerance)
        if found:
            raise ClassificationResultError(found)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "true_label": self.true_label,
            "predicted_label": self.predicted_label,
            "raw_predicted_label": self.raw_predicted_label,
            "maximum_likelihood": self.maximum_likelihood,
            "class_likelihoods": list(self.class_likelihoods),
            "class_distances": list(self.class_distances),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClassificationResult":
        """Parse a plain mapping, raising ``ValueError`` on malformed entries.

        ``true_label`` and ``predicted_label`` are required. Other missing
        keys fall back to the construction defaults. Non-finite floats are
        kept as they are.
        """

        return cls(
            true_label=_require_label(data.get("true_label"), "true_label"),
            predicted_label=_require_label(data.get("predicted_label"), "predicted_label"),
            raw_predicted_label=_optional_label(data.get("raw_predicted_label"), "raw_predicted_label"),
            maximum_likelihood=_optional_float(data.get("maximum_likelihood"), "maximum_likelihood"),
            class_likelihoods=_parse_vector(data.get("class_likelihoods"), "class_likelihoods"),
            class_distances=_parse_vector(data.get("class_distances"), "class_distances"),
        )

    @classmethod
    def from_likelihoods(
        cls,
        true_label: int,
        class_likelihoods: Sequence[float],
        class_labels: Optional[Sequence[int]] = None,
        class_distances: Sequence[float] = (),
        predicted_label: Optional[int] = None,
    ) -> "ClassificationResult":
        """Build a record from a classifier's per-class likelihoods.

        The raw prediction is the label at the arg-max of ``class_likelihoods``.
        Without ``class_labels`` the labels are ``1..K``, leaving 0 for the
        null (rejection) class. ``predicted_label`` defaults to the raw one.
        """

        scores = np.asarray(class_likelihoods, dtype=float)
        if scores.size == 0:
            raw_label = 0
            maximum = 0.0
        else:
            best_idx = int(np.argmax(scores))
            if class_labels is not None:
                if len(class_labels) != scores.size:
                    raise ValueError(
                        f"class_labels has {len(class_labels)} entries for {scores.size} likelihoods"
                    )
                raw_label = int(class_labels[best_idx])
            else:
                raw_label = best_idx + 1
            maximum = float(scores[best_idx])

        return cls(
            true_label=true_label,
            predicted_label=raw_label if predicted_label is None else predicted_label,
            raw_predicted_label=raw_label,
            maximum_likelihood=maximum,
            class_likelihoods=scores.tolist(),
            class_distances=class_distances,
        )


def _is_missing(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _to_label(value: object, field_name: str) -> int:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} is not a number: {value!r}") from exc
    if not number.is_integer():
        raise ValueError(f"{field_name} is not an integer: {value!r}")
    return int(number)


def _require_label(value: object, field_name: str) -> int:
    if _is_missing(value):
        raise ValueError(f"{field_name} is empty.")
    return _to_label(value, field_name)


def _optional_label(value: object, field_name: str) -> int:
    if _is_missing(value):
        return 0
    return _to_label(value, field_name)


def _optional_float(value: object, field_name: str) -> float:
    if _is_missing(value):
        return 0.0
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} is not a number: {value!r}") from exc


def _parse_vector(value: object, field_name: str) -> List[float]:
    if _is_missing(value):
        return []
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{field_name} must be a list, got {type(value).__name__}")

    parsed: List[float] = []
    for position, item in enumerate(value):
        if _is_missing(item):
            raise ValueError(f"{field_name} has an empty entry at position {position}")
        try:
            parsed.append(float(item))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{field_name} contains a non-numeric entry: {item!r}") from exc
    return parsed
