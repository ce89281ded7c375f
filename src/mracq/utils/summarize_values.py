"""Summarize a sequence of values to a short string."""

from collections.abc import Sequence

import torch


def summarize_values(values: torch.Tensor | Sequence[float] | None, summarization_threshold: int = 7) -> str:
    """Summarize the values of a tensor or sequence to a string.

    Sequences longer than the threshold are shortened to their first and last
    elements, separated by an ellipsis. `None` is summarized as 'None'.

    Parameters
    ----------
    values
        The values to summarize. Tensors are flattened.
    summarization_threshold
        The number of elements above which the output is shortened.
    """
    if values is None:
        return 'None'
    if isinstance(values, torch.Tensor):
        values = values.flatten().tolist()
    items = [f'{value:.3g}' if isinstance(value, float) else str(value) for value in values]
    if len(items) > summarization_threshold:
        edgeitems = 1 if summarization_threshold < 4 else 2 if summarization_threshold < 7 else 3
        items = [*items[:edgeitems], '...', *items[-edgeitems:]]
    return '[' + ', '.join(items) + ']'
