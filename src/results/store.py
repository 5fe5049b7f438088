"""Persistence helpers for batches of classification results."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence

import pandas as pd

from src.models.result import ClassificationResult
from src.utils import ensure_exists

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResultLoadOutcome:
    """Outcome of reading a result file."""

    results: List[ClassificationResult]
    skipped_count: int
    errors: List[str]


class ResultStore:
    """Reads and writes classification results as CSV or JSON.

    Rows are parsed by :meth:`ClassificationResult.from_dict` in both
    formats. Non-finite floats are written as ``nan`` / ``inf`` so that a
    blank CSV cell always means "missing".
    """

    COLUMNS = [
        "true_label",
        "predicted_label",
        "raw_predicted_label",
        "maximum_likelihood",
        "class_likelihoods",
        "class_distances",
    ]
    REQUIRED_COLUMNS = {"true_label", "predicted_label"}
    VECTOR_COLUMNS = ("class_likelihoods", "class_distances")

    def __init__(self, separator: str = "|") -> None:
        self.separator = separator

    def save_csv(self, results: Iterable[ClassificationResult], path: Path) -> Path:
        rows = []
        for result in results:
            payload = result.to_dict()
            for column in self.VECTOR_COLUMNS:
                payload[column] = self._join(payload[column])
            rows.append(payload)

        ensure_exists(path)
        pd.DataFrame(rows, columns=self.COLUMNS).to_csv(path, index=False, na_rep="nan")
        logger.debug("Wrote %d results to %s", len(rows), path)
        return path

    def load_csv(self, path: Path) -> ResultLoadOutcome:
        if not path.exists():
            raise FileNotFoundError(f"Result file not found: {path}")

        # Every cell stays text so "nan" and "" remain distinguishable.
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        missing = self.REQUIRED_COLUMNS.difference(df.columns)
        if missing:
            raise ValueError(f"Missing required columns: {', '.join(sorted(missing))}")

        rows = [self._split_vectors(row) for row in df.to_dict(orient="records")]
        return self._parse_rows(rows, path)

    def save_json(self, results: Iterable[ClassificationResult], path: Path) -> Path:
        payload = {"results": [result.to_dict() for result in results]}
        ensure_exists(path)
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        return path

    def load_json(self, path: Path) -> ResultLoadOutcome:
        if not path.exists():
            raise FileNotFoundError(f"Result file not found: {path}")

        data = json.loads(path.read_text(encoding="utf-8"))
        items = data.get("results") if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise ValueError(f"Expected a list of results in {path}")
        return self._parse_rows(items, path)

    def _parse_rows(self, rows: Sequence[Any], path: Path) -> ResultLoadOutcome:
        results: List[ClassificationResult] = []
        errors: List[str] = []
        for idx, row in enumerate(rows, start=1):
            if not isinstance(row, dict):
                errors.append(f"row {idx}: expected an object, got {type(row).__name__}")
                continue
            try:
                results.append(ClassificationResult.from_dict(row))
            except ValueError as exc:
                errors.append(f"row {idx}: {exc}")

        if errors:
            logger.warning("Skipped %d of %d rows in %s", len(errors), len(rows), path)
        return ResultLoadOutcome(results=results, skipped_count=len(errors), errors=errors)

    def _split_vectors(self, row: Dict[str, Any]) -> Dict[str, Any]:
        for column in self.VECTOR_COLUMNS:
            cell = row.get(column)
            if cell is None or not str(cell).strip():
                row[column] = None
            else:
                row[column] = [item.strip() for item in str(cell).split(self.separator)]
        return row

    def _join(self, values: Sequence[float]) -> str:
        return self.separator.join(repr(value) for value in values)
