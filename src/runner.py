"""
CLI entrypoint that summarizes a file of classification results.

Example:
    python -m src.runner data/results/session1.csv --save
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from config import get_settings
from src.evaluation import summarize
from src.models.result import ClassificationResultError
from src.results import ResultStore
from src.utils import ensure_exists

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarize classification trial results")
    parser.add_argument("results", type=Path, help="CSV or JSON file of classification results")
    parser.add_argument(
        "--format",
        choices=("csv", "json"),
        default=None,
        help="Input format (defaults to the file extension)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Write the summary as JSON to this path")
    parser.add_argument(
        "--save",
        action="store_true",
        help="Write the summary to <storage.output_dir>/<results name>_summary.json",
    )
    parser.add_argument("--strict", action="store_true", help="Fail on the first inconsistent result")
    parser.add_argument("--config", type=Path, default=None, help="Settings YAML file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def summary_path(results_path: Path, output_dir: Path) -> Path:
    return output_dir / f"{results_path.stem}_summary.json"


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )
    try:
        settings = get_settings(args.config)
    except (FileNotFoundError, yaml.YAMLError, ValidationError) as exc:
        logger.error("Could not load settings: %s", exc)
        return 1
    if not args.debug:
        logging.getLogger().setLevel(settings.logging.level)

    store = ResultStore(separator=settings.storage.sequence_separator)
    input_format = args.format or ("json" if args.results.suffix.lower() == ".json" else "csv")
    try:
        if input_format == "json":
            outcome = store.load_json(args.results)
        else:
            outcome = store.load_csv(args.results)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Could not load %s: %s", args.results, exc)
        return 1

    for error in outcome.errors:
        logger.warning("Skipped %s", error)

    try:
        summary = summarize(
            outcome.results,
            null_class_label=settings.evaluation.null_class_label,
            strict=args.strict or settings.evaluation.strict_validation,
            tolerance=settings.evaluation.likelihood_tolerance,
        )
    except ClassificationResultError as exc:
        logger.error("Inconsistent result in %s: %s", args.results, exc)
        return 1

    logger.info(
        "%d results, accuracy %.4f, rejection rate %.4f, %d changed by post-processing",
        summary.total,
        summary.accuracy,
        summary.rejection_rate,
        summary.post_processing_changes,
    )

    output = args.output
    if output is None and args.save:
        output = summary_path(args.results, settings.storage.output_dir)
    if output is not None:
        ensure_exists(output)
        output.write_text(json.dumps(summary.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info("Summary written to %s", output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
