"""Tests for summarize_values."""

import pytest
import torch
from mracq.utils import summarize_values


def test_summarize_values_none() -> None:
    """None is summarized as 'None'."""
    assert summarize_values(None) == 'None'


def test_summarize_values_short() -> None:
    """Short sequences are printed completely."""
    assert summarize_values([1, 2, 3]) == '[1, 2, 3]'


def test_summarize_values_tensor() -> None:
    """Tensors are flattened and floats are rounded to three significant digits."""
    assert summarize_values(torch.tensor([[0.5, 0.25], [0.125, 1 / 3]])) == '[0.5, 0.25, 0.125, 0.333]'


@pytest.mark.parametrize(
    ('threshold', 'expected'),
    [
        (3, '[0, ..., 9]'),
        (4, '[0, 1, ..., 8, 9]'),
        (7, '[0, 1, 2, ..., 7, 8, 9]'),
    ],
)
def test_summarize_values_long(threshold: int, expected: str) -> None:
    """Long sequences are shortened to their edges."""
    assert summarize_values(list(range(10)), summarization_threshold=threshold) == expected
