"""Union-Find (Disjoint Set Union) data structure for clustering."""

from collections.abc import Hashable
from typing import Generic, TypeVar

T = TypeVar("T", bound=Hashable)


class UnionFind(Generic[T]):
    """Union-Find data structure with path compression and union by rank.

    Implements the classic DSU algorithm for efficiently finding connected
    components in a graph. Elements are usually record positions.

    Attributes
    ----------
    parent : dict[T, T]
        Parent pointers for each element.
    rank : dict[T, int]
        Rank (approximate tree height) for each root.
    """

    def __init__(self) -> None:
        """Initialize empty Union-Find structure."""
        self.parent: dict[T, T] = {}
        self.rank: dict[T, int] = {}

    def make_set(self, x: T) -> None:
        """Create a new set containing element x.

        Parameters
        ----------
        x : T
            Element to add.
        """
        if x not in self.parent:
            self.parent[x] = x
            self.rank[x] = 0

    def find(self, x: T) -> T:
        """Find root of set containing x with path compression.

        Parameters
        ----------
        x : T
            Element to find.

        Returns
        -------
        T
            Root of set containing x.
        """
        if x not in self.parent:
            self.make_set(x)

        root = x
        while self.parent[root] != root:
            root = self.parent[root]

        # Compress iteratively so long chains cannot hit the recursion limit
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]

        return root

    def union(self, x: T, y: T) -> bool:
        """Union sets containing x and y using union by rank.

        Parameters
        ----------
        x : T
            First element.
        y : T
            Second element.

        Returns
        -------
        bool
            True if two distinct sets were merged.
        """
        root_x = self.find(x)
        root_y = self.find(y)

        if root_x == root_y:
            return False

        if self.rank[root_x] < self.rank[root_y]:
            self.parent[root_x] = root_y
        elif self.rank[root_x] > self.rank[root_y]:
            self.parent[root_y] = root_x
        else:
            self.parent[root_y] = root_x
            self.rank[root_x] += 1
        return True

    def connected(self, x: T, y: T) -> bool:
        """Check whether x and y belong to the same set."""
        return self.find(x) == self.find(y)

    def get_components(self) -> list[list[T]]:
        """Get all connected components.

        Returns
        -------
        list[list[T]]
            List of components in first-seen order; each component lists
            its elements in insertion order.
        """
        components_dict: dict[T, list[T]] = {}

        for element in self.parent:
            root = self.find(element)
            if root not in components_dict:
                components_dict[root] = []
            components_dict[root].append(element)

        return list(components_dict.values())
