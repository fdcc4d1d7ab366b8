"""Configuration system for aptertree traversals.

This module defines how users specify their traversal requirements:
which order to walk in, what data to collect, which nodes to keep and
how many to process.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Set, Tuple

from .core.node import TreeItem


class DataRequirement(Enum):
    """Specifies what data is collected for each visited node."""
    INDEX_ONLY = "index"                # Just the node index (most efficient)
    VALUE = "value"                     # Stored value
    FULL_NODE = "full"                  # TreeItem snapshot
    CHILDREN_COUNT = "children_count"   # Number of immediate children
    PATH = "path"                       # Index path from root
    CUSTOM = "custom"                   # User-defined collector


class TraversalStrategy(Enum):
    """Order in which nodes are visited."""
    BREADTH_FIRST = "bfs"           # Level by level
    DEPTH_FIRST_PRE = "dfs_pre"     # Parent before children
    DEPTH_FIRST_POST = "dfs_post"   # Children before parent
    LEVEL_ORDER = "level"           # Grouped by level
    CUSTOM = "custom"               # User-defined traverser


@dataclass
class FilterConfig:
    """Configuration for filtering nodes during traversal.

    Filters receive a TreeItem for the node being considered.
    """

    include_filter: Optional[Callable[[TreeItem], bool]] = None
    exclude_filter: Optional[Callable[[TreeItem], bool]] = None

    # Don't yield anything below an excluded node
    prune_on_exclude: bool = True

    @property
    def is_active(self) -> bool:
        return self.include_filter is not None or self.exclude_filter is not None

    def should_include(self, item: TreeItem) -> bool:
        """Check if a node passes the filters.

        Exclusion takes precedence over inclusion.
        """
        if self.is_excluded(item):
            return False

        return self.is_included(item)

    def is_excluded(self, item: TreeItem) -> bool:
        """Check the exclude filter alone (used for pruning)."""
        return bool(self.exclude_filter and self.exclude_filter(item))

    def is_included(self, item: TreeItem) -> bool:
        """Check the include filter alone."""
        if self.include_filter:
            return bool(self.include_filter(item))
        return True


@dataclass
class DepthConfig:
    """Configuration for depth-based filtering.

    Depths are relative to the node the traversal starts from.
    """

    min_depth: int = 0
    max_depth: Optional[int] = None
    specific_depths: Optional[Set[int]] = None

    def should_yield(self, depth: int) -> bool:
        if self.specific_depths is not None:
            return depth in self.specific_depths

        if depth < self.min_depth:
            return False
        if self.max_depth is not None and depth > self.max_depth:
            return False

        return True

    def traversal_bounds(self) -> Tuple[int, Optional[int]]:
        """Return the (min_depth, max_depth) the traverser needs to cover.

        specific_depths overrides the range, as in should_yield.
        """
        if self.specific_depths is not None:
            return 0, max(self.specific_depths, default=0)
        return self.min_depth, self.max_depth


@dataclass
class TraversalConfig:
    """Complete configuration for a traversal.

    The ExecutionPlan validates this configuration and assembles the
    traverser and collector it describes.
    """

    # Traversal algorithm
    strategy: TraversalStrategy = TraversalStrategy.BREADTH_FIRST
    custom_traverser: Optional[Any] = None

    # Depth control
    depth: DepthConfig = field(default_factory=DepthConfig)

    # Node filtering
    filter: FilterConfig = field(default_factory=FilterConfig)

    # Data collection
    data_requirements: DataRequirement = DataRequirement.VALUE
    custom_collector: Optional[Any] = None

    # Stop after this many yielded nodes
    max_nodes: Optional[int] = None

    # Error handling for filters and collectors
    on_error: Optional[Callable[[int, Exception], None]] = None
    skip_errors: bool = False

    # Progress reporting
    progress_callback: Optional[Callable[[int, Optional[int]], None]] = None
    progress_interval: int = 100

    @classmethod
    def shallow_scan(cls, max_depth: int = 1) -> 'TraversalConfig':
        """Config for a node and its first ``max_depth`` levels."""
        return cls(
            strategy=TraversalStrategy.BREADTH_FIRST,
            depth=DepthConfig(max_depth=max_depth),
            data_requirements=DataRequirement.VALUE,
        )

    @classmethod
    def deep_scan(cls, data_requirement: DataRequirement = DataRequirement.VALUE) -> 'TraversalConfig':
        """Config for a full bottom-up walk, children before parents."""
        return cls(
            strategy=TraversalStrategy.DEPTH_FIRST_POST,
            data_requirements=data_requirement,
        )

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.depth.min_depth < 0:
            errors.append("min_depth cannot be negative")

        if self.depth.max_depth is not None:
            if self.depth.max_depth < 0:
                errors.append("max_depth cannot be negative")
            if self.depth.max_depth < self.depth.min_depth:
                errors.append("max_depth cannot be less than min_depth")

        if self.depth.specific_depths is not None:
            if any(d < 0 for d in self.depth.specific_depths):
                errors.append("specific_depths cannot contain negative depths")

        if self.max_nodes is not None and self.max_nodes <= 0:
            errors.append("max_nodes must be positive")

        if self.progress_interval <= 0:
            errors.append("progress_interval must be positive")

        if self.strategy == TraversalStrategy.CUSTOM and self.custom_traverser is None:
            errors.append("custom_traverser required when strategy is CUSTOM")

        if self.data_requirements == DataRequirement.CUSTOM and self.custom_collector is None:
            errors.append("custom_collector required when data_requirements is CUSTOM")

        return errors
