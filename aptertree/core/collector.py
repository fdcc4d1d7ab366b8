"""Data collection strategies for aptertree.

DataCollectors decide what is extracted from each node during traversal,
so one traversal order can serve different purposes (indices only, values,
paths, subtree aggregates, ...).
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple

from .node import TreeItem
from .tree import ApterTree


class DataCollector(ABC):
    """Abstract base class for data collection strategies."""

    def __init__(self, tree: ApterTree):
        """Initialize collector with the tree being traversed.

        Args:
            tree: ApterTree the collected indices belong to
        """
        self.tree = tree

    @abstractmethod
    def collect(self, index: int, depth: int) -> Any:
        """Collect data from a node.

        Args:
            index: Index of the node
            depth: Depth relative to the traversal root

        Returns:
            Collected data (type depends on collector)
        """
        pass

    @abstractmethod
    def requires_children(self) -> bool:
        """Check if this collector needs to look at child nodes.

        Returns:
            True if collector needs child information
        """
        pass

    def reset(self, root: Optional[int] = None) -> None:
        """Drop per-run state before a traversal starts from root.

        ExecutionPlan calls this at the start of every execute(), so cached
        results never outlive a change to the tree. Collectors without
        state keep this no-op.
        """
        pass


class IndexCollector(DataCollector):
    """Collects only the node index. Cheapest collector."""

    def collect(self, index: int, depth: int) -> int:
        return index

    def requires_children(self) -> bool:
        return False


class ValueCollector(DataCollector):
    """Collects the stored value of each node."""

    def collect(self, index: int, depth: int) -> Any:
        return self.tree[index]

    def requires_children(self) -> bool:
        return False


class FullNodeCollector(DataCollector):
    """Collects a TreeItem for each node.

    The item's depth is the absolute depth in the tree, which differs from
    the traversal depth when traversal starts below the root.
    """

    def __init__(self, tree: ApterTree):
        super().__init__(tree)
        self._root_depth: Optional[int] = None

    def reset(self, root: Optional[int] = None) -> None:
        # Absolute depth is the root's depth plus the traversal depth
        self._root_depth = None if root is None else self.tree.depth(root)

    def collect(self, index: int, depth: int) -> TreeItem:
        if self._root_depth is None:
            return self.tree.item(index)
        return TreeItem(index, self.tree[index], self.tree.parent(index), self._root_depth + depth)

    def requires_children(self) -> bool:
        return False


class ChildCountCollector(DataCollector):
    """Collects node info with the number of immediate children.

    Counts for the whole traversal come from one ``child_lists`` pass made
    in ``reset``; nodes outside it fall back to a ``children`` scan.
    """

    def __init__(self, tree: ApterTree):
        super().__init__(tree)
        self._counts: Dict[int, int] = {}

    def reset(self, root: Optional[int] = None) -> None:
        self._counts = {}
        if root is not None:
            child_lists = self.tree.child_lists(root)
            self._counts = {node: len(kids) for node, kids in child_lists.items()}

    def collect(self, index: int, depth: int) -> Dict[str, Any]:
        child_count = self._counts.get(index)
        if child_count is None:
            child_count = sum(1 for _ in self.tree.children(index))
            self._counts[index] = child_count
        return {
            'index': index,
            'depth': depth,
            'child_count': child_count,
            'is_leaf': child_count == 0,
        }

    def requires_children(self) -> bool:
        return True


class PathCollector(DataCollector):
    """Collects the index path from the tree root to each node.

    Paths are memoised as tuples, so a node whose parent was already
    collected only costs one copy. Every call returns a new list.
    """

    def __init__(self, tree: ApterTree):
        super().__init__(tree)
        self._path_cache: Dict[int, Tuple[int, ...]] = {}

    def reset(self, root: Optional[int] = None) -> None:
        self._path_cache = {}

    def collect(self, index: int, depth: int) -> List[int]:
        path = self._path_cache.get(index)
        if path is None:
            parent = self.tree.parent(index)
            if parent is None:
                path = (index,)
            elif parent in self._path_cache:
                path = self._path_cache[parent] + (index,)
            else:
                path = tuple(self.tree.path(index))
            self._path_cache[index] = path

        return list(path)

    def requires_children(self) -> bool:
        return False


class AggregateCollector(DataCollector):
    """Base class for collectors that aggregate values over subtrees.

    Subclasses implement ``aggregate`` (sum, max, ...). The quantity being
    aggregated is ``key(value)`` for every node of the subtree.
    """

    def __init__(self, tree: ApterTree, key: Optional[Callable[[Any], Any]] = None):
        """Initialize with the quantity to aggregate.

        Args:
            tree: ApterTree being traversed
            key: Function mapping a node value to the quantity to aggregate
                (default: the value itself)
        """
        super().__init__(tree)
        self.key = key or (lambda value: value)
        self._cache: Dict[int, Any] = {}
        self._pending_root: Optional[int] = None

    @abstractmethod
    def aggregate(self, values: List[Any]) -> Any:
        """Aggregate multiple values into one."""
        pass

    def reset(self, root: Optional[int] = None) -> None:
        self._cache = {}
        self._pending_root = root

    def _aggregated(self, index: int) -> Any:
        if index in self._cache:
            return self._cache[index]

        # Resolve the whole traversal subtree in one pass the first time
        # it is needed; key() errors then surface from collect().
        start = index
        if self._pending_root is not None:
            start, self._pending_root = self._pending_root, None

        # Descendants always follow their ancestors, so walking the child
        # lists backwards resolves every child before its parent.
        child_lists = self.tree.child_lists(start)
        for node in sorted(child_lists, reverse=True):
            if node in self._cache:
                continue
            values = [self.key(self.tree[node])]
            values.extend(self._cache[child] for child in child_lists[node])
            self._cache[node] = self.aggregate(values)

        if index not in self._cache:
            return self._aggregated(index)
        return self._cache[index]

    def collect(self, index: int, depth: int) -> Dict[str, Any]:
        return {
            'index': index,
            'depth': depth,
            'own_value': self.key(self.tree[index]),
            'aggregated': self._aggregated(index),
        }

    def requires_children(self) -> bool:
        return True


class SumCollector(AggregateCollector):
    """Sums a quantity across each subtree."""

    def aggregate(self, values: List[Any]) -> Any:
        return sum(v for v in values if v is not None)


class MaxCollector(AggregateCollector):
    """Finds the maximum of a quantity in each subtree."""

    def aggregate(self, values: List[Any]) -> Any:
        valid_values = [v for v in values if v is not None]
        return max(valid_values) if valid_values else None


class CustomCollector(DataCollector):
    """Collector that uses a user-provided function.

    Allows custom data collection logic without subclassing.
    """

    def __init__(self,
                 tree: ApterTree,
                 collect_func: Callable[[int, int], Any],
                 requires_children_func: Optional[Callable[[], bool]] = None):
        """Initialize with custom collection function.

        Args:
            tree: ApterTree being traversed
            collect_func: Function(index, depth) -> Any
            requires_children_func: Function() -> bool (default: returns False)
        """
        super().__init__(tree)
        self.collect_func = collect_func
        self.requires_children_func = requires_children_func or (lambda: False)

    def collect(self, index: int, depth: int) -> Any:
        return self.collect_func(index, depth)

    def requires_children(self) -> bool:
        return self.requires_children_func()
