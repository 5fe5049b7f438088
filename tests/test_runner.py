import json
import logging
from pathlib import Path

from src.models.result import ClassificationResult
from src.results import ResultStore
from src.runner import main


def test_runner_writes_summary(tmp_path: Path) -> None:
    results_path = tmp_path / "results.csv"
    output_path = tmp_path / "out" / "summary.json"
    ResultStore().save_csv(
        [
            ClassificationResult(1, 1, 1, 0.9, [0.9, 0.1], [0.1, 0.9]),
            ClassificationResult(2, 1, 1, 0.6, [0.6, 0.4], [0.4, 0.6]),
        ],
        results_path,
    )

    exit_code = main([str(results_path), "--output", str(output_path)])

    assert exit_code == 0
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert payload["total"] == 2
    assert payload["accuracy"] == 0.5


def test_runner_reads_json_by_extension(tmp_path: Path) -> None:
    results_path = tmp_path / "results.json"
    output_path = tmp_path / "summary.json"
    ResultStore().save_json([ClassificationResult(3, 3, 3)], results_path)

    assert main([str(results_path), "--output", str(output_path)]) == 0
    assert json.loads(output_path.read_text(encoding="utf-8"))["correct"] == 1


def test_runner_strict_mode_fails_on_inconsistent_result(tmp_path: Path) -> None:
    results_path = tmp_path / "results.csv"
    ResultStore().save_csv([ClassificationResult(1, 1, 1, 2.5)], results_path)

    assert main([str(results_path)]) == 0
    assert main([str(results_path), "--strict"]) == 1


def test_runner_reports_missing_file(tmp_path: Path, caplog) -> None:
    with caplog.at_level(logging.ERROR):
        assert main([str(tmp_path / "absent.csv")]) == 1

    assert "Could not load" in caplog.text


def test_runner_reports_missing_settings_file(tmp_path: Path, caplog) -> None:
    results_path = tmp_path / "results.csv"
    ResultStore().save_csv([ClassificationResult(1, 1, 1)], results_path)

    with caplog.at_level(logging.ERROR):
        assert main([str(results_path), "--config", str(tmp_path / "missing.yaml")]) == 1

    assert "Could not load settings" in caplog.text


def test_runner_reports_invalid_settings(tmp_path: Path) -> None:
    results_path = tmp_path / "results.csv"
    config_path = tmp_path / "settings.yaml"
    ResultStore().save_csv([ClassificationResult(1, 1, 1)], results_path)
    config_path.write_text("storage:\n  sequence_separator: \"+\"\n", encoding="utf-8")

    assert main([str(results_path), "--config", str(config_path)]) == 1


def test_runner_saves_into_configured_output_dir(tmp_path: Path) -> None:
    results_path = tmp_path / "session1.csv"
    config_path = tmp_path / "settings.yaml"
    output_dir = tmp_path / "summaries"
    ResultStore().save_csv([ClassificationResult(2, 2, 2), ClassificationResult(1, 2, 2)], results_path)
    config_path.write_text(f"storage:\n  output_dir: \"{output_dir.as_posix()}\"\n", encoding="utf-8")

    assert main([str(results_path), "--config", str(config_path), "--save"]) == 0

    payload = json.loads((output_dir / "session1_summary.json").read_text(encoding="utf-8"))
    assert payload["total"] == 2
    assert payload["correct"] == 1
