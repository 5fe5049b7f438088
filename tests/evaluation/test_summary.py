import logging

import pytest

from src.evaluation import summarize
from src.models.result import ClassificationResult, ClassificationResultError


def make_results() -> list:
    return [
        ClassificationResult(1, 1, 1, 0.8, [0.8, 0.2], [0.2, 1.4]),
        ClassificationResult(1, 2, 2, 0.6, [0.4, 0.6], [1.1, 0.7]),
        ClassificationResult(2, 2, 2, 0.9, [0.1, 0.9], [1.9, 0.1]),
        ClassificationResult(2, 0, 1, 0.5, [0.5, 0.5], [0.9, 0.9]),
    ]


def test_summary_counts_and_accuracy() -> None:
    summary = summarize(make_results())

    assert summary.total == 4
    assert summary.correct == 2
    assert summary.accuracy == pytest.approx(0.5)
    assert summary.mean_maximum_likelihood == pytest.approx(0.7)
    assert summary.invalid == 0


def test_summary_confusion_matrix_rows_are_true_labels() -> None:
    summary = summarize(make_results())

    assert summary.class_labels == [0, 1, 2]
    assert summary.confusion_matrix == [
        [0, 0, 0],
        [0, 1, 1],
        [1, 0, 1],
    ]


def test_summary_per_class_metrics() -> None:
    summary = summarize(make_results())

    assert summary.precision[1] == pytest.approx(1.0)
    assert summary.recall[1] == pytest.approx(0.5)
    assert summary.precision[2] == pytest.approx(0.5)
    assert summary.recall[2] == pytest.approx(0.5)
    assert summary.f_measure[2] == pytest.approx(0.5)
    assert summary.precision[0] == 0.0


def test_summary_rejection_and_post_processing() -> None:
    summary = summarize(make_results())

    assert summary.rejected == 1
    assert summary.rejection_rate == pytest.approx(0.25)
    assert summary.post_processing_changes == 1


def test_summary_respects_null_class_label() -> None:
    results = [ClassificationResult(1, 9, 1, 0.3, [0.3], [])]

    assert summarize(results).rejected == 0
    assert summarize(results, null_class_label=9).rejected == 1


def test_summary_of_empty_batch() -> None:
    summary = summarize([])

    assert summary.total == 0
    assert summary.accuracy == 0.0
    assert summary.confusion_matrix == []
    assert summary.to_dict()["class_labels"] == []


def test_summary_counts_inconsistent_records(caplog: pytest.LogCaptureFixture) -> None:
    results = make_results() + [ClassificationResult(1, 1, 1, 0.2, [0.9, 0.1], [0.1])]

    with caplog.at_level(logging.WARNING, logger="src.evaluation.summary"):
        summary = summarize(results)

    assert summary.invalid == 1
    assert summary.total == 5
    assert "Result 4 is inconsistent" in caplog.text


def test_summary_strict_mode_raises() -> None:
    results = make_results() + [ClassificationResult(1, 1, 1, 1.4)]

    with pytest.raises(ClassificationResultError):
        summarize(results, strict=True)


def test_summary_to_dict_is_json_ready() -> None:
    payload = summarize(make_results()).to_dict()

    assert payload["precision"]["1"] == pytest.approx(1.0)
    assert payload["confusion_matrix"][2] == [1, 0, 1]
    assert payload["rejected"] == 1
