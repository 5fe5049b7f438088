"""Write a demo batch of classification results and summarize it."""
from __future__ import annotations

import json
import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import get_settings
from src.evaluation import summarize
from src.models.result import ClassificationResult
from src.results import ResultStore

NUM_CLASSES = 4
NUM_TRIALS = 40
REJECTION_THRESHOLD = 0.4


def make_results(rng: np.random.Generator) -> list:
    results = []
    for _ in range(NUM_TRIALS):
        true_label = int(rng.integers(1, NUM_CLASSES + 1))
        raw = rng.random(NUM_CLASSES)
        raw[true_label - 1] += 1.0
        likelihoods = raw / raw.sum()
        distances = 1.0 - likelihoods
        record = ClassificationResult.from_likelihoods(true_label, likelihoods, class_distances=distances)
        if record.maximum_likelihood < REJECTION_THRESHOLD:
            record = record.replace(predicted_label=0)
        results.append(record)
    return results


def main() -> None:
    settings = get_settings()
    data_dir = settings.storage.output_dir
    if not data_dir.is_absolute():
        data_dir = ROOT / data_dir
    csv_path = data_dir / "demo_results.csv"
    summary_path = data_dir / "demo_summary.json"

    store = ResultStore(separator=settings.storage.sequence_separator)
    store.save_csv(make_results(np.random.default_rng(7)), csv_path)

    outcome = store.load_csv(csv_path)
    print(f"loaded {len(outcome.results)} results; skipped={outcome.skipped_count}")

    summary = summarize(outcome.results)
    print(f"accuracy={summary.accuracy:.3f} rejected={summary.rejected} invalid={summary.invalid}")
    summary_path.write_text(json.dumps(summary.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"saved summary -> {summary_path}")


if __name__ == "__main__":
    main()
