"""Exceptions raised by the acquisition data containers and transforms."""


class ShapeMismatchError(ValueError):
    """A mismatch between the shape of data and the declared counts or the requested shape."""


class DegenerateInputError(ValueError):
    """Input that leaves nothing to work on, e.g. an empty set of k-space nodes."""
