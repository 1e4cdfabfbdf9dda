import pytest
import torch

from kord.metrics.multilabel import (
    binarize,
    exact_match,
    f1_from_counts,
    multilabel_metrics,
    per_class_counts,
)


def test_binarize_threshold():
    probs = torch.tensor([[0.2, 0.5, 0.8]])
    assert binarize(probs).tolist() == [[0, 1, 1]]
    assert binarize(probs, threshold=0.6).tolist() == [[0, 0, 1]]


def test_per_class_counts():
    y_true = torch.tensor([[1, 0, 1], [0, 1, 1]])
    y_pred = torch.tensor([[1, 1, 0], [0, 1, 1]])
    tp, fp, fn = per_class_counts(y_true, y_pred)
    assert tp.tolist() == [1, 1, 1]
    assert fp.tolist() == [0, 1, 0]
    assert fn.tolist() == [0, 0, 1]


def test_f1_handles_empty_class():
    tp, fp, fn = torch.tensor([0]), torch.tensor([0]), torch.tensor([0])
    assert f1_from_counts(tp, fp, fn).item() == 0.0


def test_exact_match():
    y_true = torch.tensor([[1, 0], [0, 1], [1, 1]])
    y_pred = torch.tensor([[1, 0], [1, 1], [1, 1]])
    assert exact_match(y_true, y_pred) == pytest.approx(2 / 3)


def test_multilabel_metrics_summary():
    probs = torch.tensor([[0.9, 0.1, 0.7], [0.2, 0.6, 0.4]])
    targets = torch.tensor([[1.0, 0.0, 0.0], [0.0, 1.0, 1.0]])
    m = multilabel_metrics(probs, targets)
    # tp=2, fp=1, fn=1
    assert m["micro_precision"] == pytest.approx(2 / 3)
    assert m["micro_recall"] == pytest.approx(2 / 3)
    assert m["micro_f1"] == pytest.approx(2 / 3)
    assert m["exact_match"] == 0.0
    assert m["macro_f1"] == pytest.approx(2 / 3)


def test_perfect_prediction():
    targets = torch.tensor([[1.0, 0.0], [0.0, 1.0]])
    m = multilabel_metrics(targets * 0.9 + 0.05, targets)
    assert m["exact_match"] == 1.0
    assert m["micro_f1"] == 1.0
