"""Tree traversal strategies for aptertree.

Traversers implement different orders for walking an ApterTree starting
from any node. They all build the child lists for the starting subtree in
one pass up front, so a full traversal costs O(n) instead of one scan per
visited node.

Parent indices always precede their children, so the structure cannot
contain cycles and no visited-set bookkeeping is needed.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Dict, Iterator, List, Optional, Tuple

from .tree import ApterTree


class TreeTraverser(ABC):
    """Abstract base class for tree traversal strategies."""

    def __init__(self, tree: ApterTree):
        """Initialize traverser with the tree to walk.

        Args:
            tree: ApterTree to traverse
        """
        self.tree = tree

    @abstractmethod
    def traverse(self,
                 root: int,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[int, int]]:
        """Traverse the subtree starting at root.

        Args:
            root: Index of the starting node
            max_depth: Maximum depth to traverse (None = unlimited)
            min_depth: Minimum depth before yielding nodes

        Yields:
            Tuples of (index, depth) where depth is relative to root
        """
        pass

    def _child_lists(self, root: int) -> Dict[int, List[int]]:
        return self.tree.child_lists(root)

    def _should_yield(self, depth: int, min_depth: int, max_depth: Optional[int]) -> bool:
        if depth < min_depth:
            return False
        if max_depth is not None and depth > max_depth:
            return False
        return True

    def _should_explore(self, depth: int, max_depth: Optional[int]) -> bool:
        if max_depth is None:
            return True
        return depth < max_depth


class BreadthFirstTraverser(TreeTraverser):
    """Breadth-first traversal.

    Visits all nodes at depth N before any node at depth N+1.
    """

    def traverse(self,
                 root: int,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[int, int]]:
        children = self._child_lists(root)
        queue: Deque[Tuple[int, int]] = deque([(root, 0)])

        while queue:
            index, depth = queue.popleft()

            if self._should_yield(depth, min_depth, max_depth):
                yield (index, depth)

            if self._should_explore(depth, max_depth):
                for child in children[index]:
                    queue.append((child, depth + 1))


class DepthFirstPreOrderTraverser(TreeTraverser):
    """Depth-first pre-order traversal.

    Visits a parent before its children, children in index order. Uses an
    explicit stack so long chains do not hit the recursion limit.
    """

    def traverse(self,
                 root: int,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[int, int]]:
        children = self._child_lists(root)
        stack: List[Tuple[int, int]] = [(root, 0)]

        while stack:
            index, depth = stack.pop()

            if self._should_yield(depth, min_depth, max_depth):
                yield (index, depth)

            if self._should_explore(depth, max_depth):
                # Reversed so the lowest index is popped first
                for child in reversed(children[index]):
                    stack.append((child, depth + 1))


class DepthFirstPostOrderTraverser(TreeTraverser):
    """Depth-first post-order traversal.

    Visits children before their parent. Useful for aggregating values
    bottom-up or for removing a subtree leaf by leaf.
    """

    def traverse(self,
                 root: int,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[int, int]]:
        children = self._child_lists(root)
        # (index, depth, expanded)
        stack: List[Tuple[int, int, bool]] = [(root, 0, False)]

        while stack:
            index, depth, expanded = stack.pop()

            if expanded:
                if self._should_yield(depth, min_depth, max_depth):
                    yield (index, depth)
                continue

            stack.append((index, depth, True))
            if self._should_explore(depth, max_depth):
                for child in reversed(children[index]):
                    stack.append((child, depth + 1, False))


class LevelOrderTraverser(TreeTraverser):
    """Level-order traversal with level grouping.

    Yields the same order as breadth-first, but builds each level completely
    before moving to the next one.
    """

    def traverse(self,
                 root: int,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[int, int]]:
        children = self._child_lists(root)
        current_level: List[int] = [root]
        current_depth = 0

        while current_level and (max_depth is None or current_depth <= max_depth):
            next_level: List[int] = []

            for index in current_level:
                if self._should_yield(current_depth, min_depth, max_depth):
                    yield (index, current_depth)

                if self._should_explore(current_depth, max_depth):
                    next_level.extend(children[index])

            current_level = next_level
            current_depth += 1


def create_traverser(strategy: str, tree: ApterTree) -> TreeTraverser:
    """Create a traverser instance by strategy name.

    Args:
        strategy: Name of traversal strategy (bfs, dfs_pre, dfs_post, level)
        tree: ApterTree to traverse

    Returns:
        TreeTraverser instance

    Raises:
        ValueError: If strategy name is not recognized
    """
    strategies = {
        'bfs': BreadthFirstTraverser,
        'breadth_first': BreadthFirstTraverser,
        'dfs': DepthFirstPreOrderTraverser,
        'dfs_pre': DepthFirstPreOrderTraverser,
        'depth_first_pre': DepthFirstPreOrderTraverser,
        'dfs_post': DepthFirstPostOrderTraverser,
        'depth_first_post': DepthFirstPostOrderTraverser,
        'level': LevelOrderTraverser,
        'level_order': LevelOrderTraverser,
    }

    strategy_lower = strategy.lower()
    if strategy_lower not in strategies:
        raise ValueError(
            f"Unknown traversal strategy: {strategy}. "
            f"Choose from: {', '.join(strategies.keys())}"
        )

    return strategies[strategy_lower](tree)
