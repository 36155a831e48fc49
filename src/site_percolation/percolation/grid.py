"""
Site percolation model on an n-by-n grid.

Sites are opened one at a time and the model answers whether the system
percolates, i.e. whether some chain of open neighbouring sites links the top
row to the bottom row.

Connectivity is kept in a UnionFind over n*n + 1 elements. Element 0 is a
virtual top site joined to every open site of row 1; sites are numbered
row-major from 1. There is deliberately no virtual bottom site: joining every
bottom-row site to a shared bottom element lets a percolating component make
unrelated bottom-row sites look full ("backwash"). Instead every component
carries a status recording whether it touches the top and/or the bottom row,
stored at the component root and at the most recently opened site.
"""

from enum import IntEnum
from typing import Tuple

import numpy as np

from ..errors import InvalidArgumentError, OutOfRangeError
from .union_find import UnionFind


class SiteStatus(IntEnum):
    """Status of a site, or of the component rooted at it."""
    BLOCKED = 0
    OPEN = 1
    OPEN_TOP = 2
    OPEN_BOTTOM = 3
    OPEN_BOTH = 4


# Values returned by PercolationGrid.to_array()
CELL_BLOCKED = 0
CELL_OPEN = 1
CELL_FULL = 2


def _fold_status(status: int, top: bool, bottom: bool) -> Tuple[bool, bool]:
    """
    Merge a stored status into a running (top, bottom) pair.

    Args:
        status: SiteStatus value of a neighbour or component root
        top: Whether the component touches the top row so far
        bottom: Whether the component touches the bottom row so far

    Returns:
        Updated (top, bottom) pair
    """
    if status == SiteStatus.OPEN_TOP:
        top = True
    elif status == SiteStatus.OPEN_BOTTOM:
        bottom = True
    elif status == SiteStatus.OPEN_BOTH:
        top = True
        bottom = True
    return top, bottom


def _status_from_flags(top: bool, bottom: bool) -> SiteStatus:
    if top and bottom:
        return SiteStatus.OPEN_BOTH
    if bottom:
        return SiteStatus.OPEN_BOTTOM
    if top:
        return SiteStatus.OPEN_TOP
    return SiteStatus.OPEN


class PercolationGrid:
    """
    An n-by-n grid of sites, all blocked initially.

    Rows and columns are 1-based.

    Example:
        grid = PercolationGrid(3)
        for row in range(1, 4):
            grid.open(row, 2)
        grid.percolates()  # True
    """

    TOP = 0

    def __init__(self, n: int):
        """
        Create an n-by-n grid with every site blocked.

        Args:
            n: Side length of the grid

        Raises:
            InvalidArgumentError: If n < 1
        """
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
            raise InvalidArgumentError(f"Grid size must be an integer, got {n!r}")
        if n < 1:
            raise InvalidArgumentError(f"Grid size cannot be less than one: {n}")

        self.n = int(n)
        self._uf = UnionFind(self.n * self.n + 1)
        self._status = np.zeros(self.n * self.n + 1, dtype=np.int8)
        # The virtual top is open so it always contributes to an opened neighbour
        self._status[self.TOP] = SiteStatus.OPEN_TOP
        self._open_count = 0
        self._percolated = False

    # --- Helpers ---

    def _check(self, row: int, col: int) -> None:
        if row < 1 or row > self.n or col < 1 or col > self.n:
            raise OutOfRangeError(row, col, self.n)

    def _index(self, row: int, col: int) -> int:
        return (row - 1) * self.n + col

    def _neighbours(self, row: int, col: int):
        if row > 1:
            yield row - 1, col
        if row < self.n:
            yield row + 1, col
        if col > 1:
            yield row, col - 1
        if col < self.n:
            yield row, col + 1

    # --- Operations ---

    def open(self, row: int, col: int) -> None:
        """
        Open the site (row, col) if it is not open already.

        Args:
            row: Row of the site, 1..n
            col: Column of the site, 1..n

        Raises:
            OutOfRangeError: If row or col is outside [1, n]
        """
        self._check(row, col)
        site = self._index(row, col)
        if self._status[site] != SiteStatus.BLOCKED:
            return

        self._open_count += 1
        top = False
        bottom = False

        if row == 1:
            self._uf.union(site, self.TOP)
            top = True
        # Bottom contact is recorded in the status only, never as a union
        if row == self.n:
            bottom = True

        for nrow, ncol in self._neighbours(row, col):
            neighbour = self._index(nrow, ncol)
            status = self._status[neighbour]
            if status == SiteStatus.BLOCKED:
                continue
            top, bottom = _fold_status(status, top, bottom)
            # A neighbour's own slot can be stale, its root never is
            top, bottom = _fold_status(self._status[self._uf.find(neighbour)], top, bottom)
            self._uf.union(site, neighbour)

        # The root may carry contact picked up by earlier unions
        root = self._uf.find(site)
        top, bottom = _fold_status(self._status[root], top, bottom)

        status = _status_from_flags(top, bottom)
        if status == SiteStatus.OPEN_BOTH:
            self._percolated = True
        self._status[site] = status
        if root != self.TOP:
            self._status[root] = status

    def is_open(self, row: int, col: int) -> bool:
        """Return True if the site (row, col) is open."""
        self._check(row, col)
        return bool(self._status[self._index(row, col)] != SiteStatus.BLOCKED)

    def is_full(self, row: int, col: int) -> bool:
        """
        Return True if the site (row, col) is connected to the top row.

        A blocked site never shares a component with the virtual top, so no
        separate open check is needed.
        """
        self._check(row, col)
        return self._uf.connected(self.TOP, self._index(row, col))

    def site_status(self, row: int, col: int) -> SiteStatus:
        """Return the stored status of the site (row, col)."""
        self._check(row, col)
        return SiteStatus(int(self._status[self._index(row, col)]))

    def number_of_open_sites(self) -> int:
        return self._open_count

    @property
    def open_count(self) -> int:
        return self._open_count

    def percolates(self) -> bool:
        return self._percolated

    def open_fraction(self) -> float:
        """Fraction of the n*n sites that are open."""
        return self._open_count / (self.n * self.n)

    # --- Inspection ---

    def to_array(self) -> np.ndarray:
        """
        Grid state as an (n, n) int8 matrix.

        Returns:
            Matrix with CELL_BLOCKED, CELL_OPEN or CELL_FULL per site
        """
        cells = np.full((self.n, self.n), CELL_BLOCKED, dtype=np.int8)
        for row in range(1, self.n + 1):
            for col in range(1, self.n + 1):
                if self.is_full(row, col):
                    cells[row - 1, col - 1] = CELL_FULL
                elif self.is_open(row, col):
                    cells[row - 1, col - 1] = CELL_OPEN
        return cells

    def render(self) -> str:
        """Text picture of the grid: '#' blocked, '.' open, 'o' full."""
        symbols = {CELL_BLOCKED: '#', CELL_OPEN: '.', CELL_FULL: 'o'}
        cells = self.to_array()
        return "\n".join("".join(symbols[int(c)] for c in line) for line in cells)

    def __repr__(self) -> str:
        return (f"PercolationGrid(n={self.n}, open={self._open_count}, "
                f"percolates={self._percolated})")
