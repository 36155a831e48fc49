"""
Exceptions raised by the percolation model and threshold estimator.
"""


class PercolationError(Exception):
    """Base class for errors raised by site_percolation."""


class InvalidArgumentError(PercolationError, ValueError):
    """A grid size, trial count or worker count is smaller than 1."""


class OutOfRangeError(PercolationError, IndexError):
    """A row or column lies outside [1, n]."""

    def __init__(self, row: int, col: int, n: int):
        self.row = row
        self.col = col
        self.n = n
        super().__init__(f"Site ({row}, {col}) is outside the {n}x{n} grid")
