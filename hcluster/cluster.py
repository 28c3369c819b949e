"""Dendrogram node and merge log records."""

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional


@dataclass(frozen=True, eq=False)
class Cluster:
    """
    Node of the binary merge tree.

    A leaf wraps one input item in ``value``. An internal node owns its two
    children and carries no value.
    """
    value: Any = None
    left: Optional['Cluster'] = None
    right: Optional['Cluster'] = None
    size: int = 1

    @classmethod
    def leaf(cls, value: Any) -> 'Cluster':
        return cls(value=value)

    @classmethod
    def merge(cls, left: 'Cluster', right: 'Cluster') -> 'Cluster':
        """Build the parent of two clusters."""
        return cls(left=left, right=right, size=left.size + right.size)

    @property
    def is_leaf(self) -> bool:
        return self.left is None

    def leaves(self) -> Iterator['Cluster']:
        """Yield the leaves under this node, left to right."""
        # explicit stack, dendrograms can be deeper than the recursion limit
        stack = [self]
        while stack:
            node = stack.pop()
            if node.is_leaf:
                yield node
            else:
                stack.append(node.right)
                stack.append(node.left)

    def values(self) -> List[Any]:
        """Get the items under this node, left to right."""
        return [node.value for node in self.leaves()]

    def __repr__(self) -> str:
        if self.is_leaf:
            return f"Cluster(value={self.value!r})"
        return f"Cluster(size={self.size}, left={self.left!r}, right={self.right!r})"


@dataclass(frozen=True)
class MergeStep:
    """Record of one merge: surviving key, retired key, height and size."""
    left: int
    right: int
    distance: float
    size: int
