"""TreeItem snapshot for aptertree.

Nodes in an Apter tree are plain indices. TreeItem bundles what is known
about one index at a point in time so filters and collectors can work with
a single object instead of reaching back into the tree.
"""

from typing import Any, NamedTuple, Optional


class TreeItem(NamedTuple):
    """Immutable view of a single node.

    The item is a snapshot: it is not updated if the tree changes after it
    was produced.
    """

    index: int
    value: Any
    parent: Optional[int]
    depth: int

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def __str__(self) -> str:
        return f"{self.index}: {self.value!r}"
