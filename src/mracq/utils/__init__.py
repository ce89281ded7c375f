"""Functions for summarizing tensors and sequences."""

from mracq.utils.summarize_values import summarize_values

__all__ = ["summarize_values"]
