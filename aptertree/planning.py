"""Execution planning for aptertree.

The ExecutionPlan validates a TraversalConfig, picks the traverser and
collector it describes and runs them against an ApterTree.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .config import DataRequirement, TraversalConfig, TraversalStrategy
from .core.collector import (
    ChildCountCollector,
    DataCollector,
    FullNodeCollector,
    IndexCollector,
    PathCollector,
    ValueCollector,
)
from .core.errors import ConfigurationError, OutOfBoundsError
from .core.node import TreeItem
from .core.traverser import TreeTraverser, create_traverser
from .core.tree import ApterTree

logger = logging.getLogger(__name__)


class ExecutionPlan:
    """Validated execution plan for a traversal.

    The plan is the bridge between user intent (TraversalConfig) and
    execution. Configuration problems are reported up front, before any
    node is visited.
    """

    def __init__(self, config: TraversalConfig, tree: ApterTree):
        """Create and validate an execution plan.

        Args:
            config: Traversal configuration
            tree: Tree to traverse

        Raises:
            ConfigurationError: If the configuration is inconsistent
        """
        self.config = config
        self.tree = tree

        config_errors = config.validate()
        if config_errors:
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        self.traverser = self._select_traverser()
        self.collector = self._select_collector()

        # Execution state, reset by every execute()
        self.nodes_processed = 0
        self.errors_encountered: List[Tuple[int, str]] = []

        logger.debug("Execution plan ready: %s", self.get_summary())

    def _select_traverser(self) -> TreeTraverser:
        if self.config.strategy == TraversalStrategy.CUSTOM:
            return self.config.custom_traverser

        return create_traverser(self.config.strategy.value, self.tree)

    def _select_collector(self) -> DataCollector:
        if self.config.data_requirements == DataRequirement.CUSTOM:
            return self.config.custom_collector

        collector_map = {
            DataRequirement.INDEX_ONLY: IndexCollector,
            DataRequirement.VALUE: ValueCollector,
            DataRequirement.FULL_NODE: FullNodeCollector,
            DataRequirement.CHILDREN_COUNT: ChildCountCollector,
            DataRequirement.PATH: PathCollector,
        }

        collector_class = collector_map[self.config.data_requirements]
        return collector_class(self.tree)

    def _resolve_root(self, root: Optional[int]) -> int:
        if root is None:
            return self.tree.root()
        if not isinstance(root, int) or isinstance(root, bool) or root not in self.tree.keys():
            raise OutOfBoundsError(root, len(self.tree))
        return root

    def _item(self, index: int, depth: int) -> TreeItem:
        """Build a TreeItem for a node whose absolute depth is known."""
        return TreeItem(index, self.tree[index], self.tree.parent(index), depth)

    def _is_pruned(self, index: int, depth: int, root: int, memo: Dict[int, bool]) -> bool:
        """Check if index or any ancestor up to root is excluded.

        Results are memoised per node, so each node's exclude filter runs at
        most once per execution regardless of traversal order. ``depth`` is
        the absolute depth of index.
        """
        chain = []
        current = index
        while current not in memo:
            chain.append(current)
            if current == root:
                break
            current = self.tree.parent(current)

        pruned = memo.get(current, False)
        # chain[k] sits k levels above index
        for offset in range(len(chain) - 1, -1, -1):
            node = chain[offset]
            pruned = pruned or self.config.filter.is_excluded(self._item(node, depth - offset))
            memo[node] = pruned
        return memo[index]

    def _report_progress(self, total: Optional[int]) -> None:
        if self.config.progress_callback:
            if self.nodes_processed % self.config.progress_interval == 0:
                self.config.progress_callback(self.nodes_processed, total)

    def execute(self, root: Optional[int] = None) -> Iterator[Tuple[int, Any]]:
        """Execute the traversal plan.

        Args:
            root: Index to start from (default: the tree root)

        Yields:
            Tuples of (index, collected_data)

        Raises:
            EmptyTreeError: If root is None and the tree is empty
            OutOfBoundsError: If root is not a node of the tree
        """
        root = self._resolve_root(root)

        self.nodes_processed = 0
        self.errors_encountered = []
        self.collector.reset(root)

        depth_config = self.config.depth
        filter_config = self.config.filter
        prune = filter_config.prune_on_exclude and filter_config.exclude_filter is not None
        pruned: Dict[int, bool] = {}
        total = len(self.tree.subtree(root)) if self.config.progress_callback else None
        root_depth = self.tree.depth(root) if filter_config.is_active else 0

        min_depth, max_depth = depth_config.traversal_bounds()
        for index, depth in self.traverser.traverse(root, max_depth=max_depth, min_depth=min_depth):
            if not depth_config.should_yield(depth):
                continue

            try:
                if prune and self._is_pruned(index, root_depth + depth, root, pruned):
                    continue

                if filter_config.is_active:
                    item = self._item(index, root_depth + depth)
                    # With pruning on, exclusion is already settled above
                    if prune:
                        keep = filter_config.is_included(item)
                    else:
                        keep = filter_config.should_include(item)
                    if not keep:
                        continue

                data = self.collector.collect(index, depth)

            except Exception as e:
                self.errors_encountered.append((index, str(e)))
                if self.config.on_error:
                    self.config.on_error(index, e)
                if not self.config.skip_errors:
                    raise
                logger.warning("Skipping node %d after error: %s", index, e)
                continue

            self.nodes_processed += 1
            self._report_progress(total)

            yield (index, data)

            if self.config.max_nodes is not None and self.nodes_processed >= self.config.max_nodes:
                logger.debug("Stopping after max_nodes=%d", self.config.max_nodes)
                break

    def estimate_work(self, root: Optional[int] = None) -> Dict[str, Any]:
        """Estimate the work required for a traversal from root.

        The subtree size is exact; the yielded count can be lower once depth
        limits, filters and max_nodes apply.
        """
        root = self._resolve_root(root)
        subtree_size = len(self.tree.subtree(root))
        estimated = subtree_size
        if self.config.max_nodes is not None:
            estimated = min(estimated, self.config.max_nodes)

        return {
            'subtree_size': subtree_size,
            'estimated_nodes': estimated,
            'requires_children': self.collector.requires_children(),
        }

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of execution plan."""
        return {
            'strategy': self.config.strategy.value,
            'data_requirements': self.config.data_requirements.value,
            'max_depth': self.config.depth.max_depth,
            'min_depth': self.config.depth.min_depth,
            'max_nodes': self.config.max_nodes,
            'tree_size': len(self.tree),
            'traverser': self.traverser.__class__.__name__,
            'collector': self.collector.__class__.__name__,
        }
