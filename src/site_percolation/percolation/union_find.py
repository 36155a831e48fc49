"""
Weighted quick-union with path compression.

Elements are the integers 0..n-1. The smaller tree is always attached under
the root of the larger one, and find() halves the path it walks, which keeps
every operation amortized near-constant.
"""

import numpy as np


class UnionFind:
    """
    Disjoint-set forest over a fixed number of elements.

    Example:
        uf = UnionFind(4)
        uf.union(0, 1)
        uf.connected(0, 1)  # True
    """

    def __init__(self, n: int):
        """
        Initialize n singleton components.

        Args:
            n: Number of elements
        """
        if n < 0:
            raise ValueError(f"Number of elements cannot be negative: {n}")
        self.n = n
        self.parent = np.arange(n, dtype=np.intp)
        self.size = np.ones(n, dtype=np.intp)
        self.count = n

    def _validate(self, p: int) -> None:
        if p < 0 or p >= self.n:
            raise IndexError(f"Element {p} is not between 0 and {self.n - 1}")

    def find(self, p: int) -> int:
        """
        Return the root of the component containing p.

        Args:
            p: Element index

        Returns:
            Root element index
        """
        self._validate(p)
        parent = self.parent
        while parent[p] != p:
            parent[p] = parent[parent[p]]  # path halving
            p = parent[p]
        return int(p)

    def connected(self, p: int, q: int) -> bool:
        """Return True if p and q are in the same component."""
        return self.find(p) == self.find(q)

    def union(self, p: int, q: int) -> int:
        """
        Merge the components containing p and q.

        Args:
            p: First element index
            q: Second element index

        Returns:
            Root of the merged component
        """
        root_p = self.find(p)
        root_q = self.find(q)
        if root_p == root_q:
            return root_p

        if self.size[root_p] < self.size[root_q]:
            root_p, root_q = root_q, root_p

        self.parent[root_q] = root_p
        self.size[root_p] += self.size[root_q]
        self.count -= 1
        return root_p

    def component_size(self, p: int) -> int:
        """Number of elements in the component containing p."""
        return int(self.size[self.find(p)])
