"""High-level API for aptertree.

Simple functional interfaces for common traversal tasks. These wrap
TraversalConfig and ExecutionPlan for the cases where building them by
hand is more ceremony than needed.
"""

from dataclasses import fields
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from .config import (
    DataRequirement,
    DepthConfig,
    FilterConfig,
    TraversalConfig,
    TraversalStrategy,
)
from .core.node import TreeItem
from .core.tree import ApterTree
from .planning import ExecutionPlan


def traverse_tree(
    tree: ApterTree,
    root: Optional[int] = None,
    strategy: Union[TraversalStrategy, str] = TraversalStrategy.BREADTH_FIRST,
    max_depth: Optional[int] = None,
    min_depth: int = 0,
    include_filter: Optional[Callable[[TreeItem], bool]] = None,
    exclude_filter: Optional[Callable[[TreeItem], bool]] = None,
    on_error: Optional[Callable[[int, Exception], None]] = None,
    **kwargs
) -> Iterator[int]:
    """Walk a tree and yield node indices.

    Args:
        tree: Tree to traverse
        root: Index to start from (default: the tree root)
        strategy: Traversal strategy (bfs, dfs_pre, dfs_post, level)
        max_depth: Maximum depth below root to visit
        min_depth: Minimum depth below root before yielding nodes
        include_filter: Keep only items for which this returns True
        exclude_filter: Drop items for which this returns True, along with
            everything below them
        on_error: Called with (index, exception) when a filter fails; the
            node is then skipped instead of aborting the traversal
        **kwargs: Additional TraversalConfig attributes, plus
            specific_depths and prune_on_exclude

    Yields:
        Indices of matching nodes

    Raises:
        TypeError: If a keyword is not a traversal option

    Example:
        >>> tree = ApterTree.from_arrays("rab", [None, 0, 0])
        >>> list(traverse_tree(tree, strategy="dfs_post"))
        [1, 2, 0]
    """
    config = TraversalConfig(
        strategy=_parse_strategy(strategy),
        depth=DepthConfig(min_depth=min_depth, max_depth=max_depth),
        filter=FilterConfig(
            include_filter=include_filter,
            exclude_filter=exclude_filter,
        ),
        data_requirements=DataRequirement.INDEX_ONLY,
        on_error=on_error,
        skip_errors=on_error is not None,
    )

    _apply_options(config, kwargs)

    plan = ExecutionPlan(config, tree)
    for index, _ in plan.execute(root):
        yield index


def collect_tree_data(
    tree: ApterTree,
    root: Optional[int] = None,
    data_requirement: DataRequirement = DataRequirement.VALUE,
    **kwargs
) -> Iterator[Tuple[int, Any]]:
    """Traverse a tree and collect data for each node.

    Args:
        tree: Tree to traverse
        root: Index to start from (default: the tree root)
        data_requirement: What to collect
        **kwargs: Traversal options (see traverse_tree)

    Yields:
        Tuples of (index, collected_data)

    Example:
        >>> tree = ApterTree.from_arrays("rab", [None, 0, 0])
        >>> dict(collect_tree_data(tree))
        {0: 'r', 1: 'a', 2: 'b'}
    """
    config_kwargs = kwargs.copy()
    config_kwargs['data_requirement'] = data_requirement

    config = _build_config_from_kwargs(**config_kwargs)
    plan = ExecutionPlan(config, tree)

    yield from plan.execute(root)


def count_nodes(tree: ApterTree, root: Optional[int] = None, **kwargs) -> int:
    """Count the nodes a traversal with these options would yield."""
    count = 0
    for _ in traverse_tree(tree, root, **kwargs):
        count += 1
    return count


def find_nodes(
    tree: ApterTree,
    predicate: Callable[[TreeItem], bool],
    root: Optional[int] = None,
    **kwargs
) -> Iterator[int]:
    """Yield indices of nodes whose TreeItem satisfies predicate.

    Example:
        >>> tree = ApterTree.from_arrays([10, 3, 7], [None, 0, 0])
        >>> list(find_nodes(tree, lambda item: item.value > 5))
        [0, 2]
    """
    kwargs['include_filter'] = predicate
    yield from traverse_tree(tree, root, **kwargs)


def get_tree_paths(
    tree: ApterTree,
    root: Optional[int] = None,
    **kwargs
) -> Iterator[List[int]]:
    """Yield the index path from the tree root to each visited node."""
    kwargs['data_requirement'] = DataRequirement.PATH

    for _, path in collect_tree_data(tree, root, **kwargs):
        yield path


def get_leaf_nodes(
    tree: ApterTree,
    root: Optional[int] = None,
    **kwargs
) -> Iterator[int]:
    """Yield the leaves reachable from root, in traversal order."""
    leaves = set(tree.leaves())
    for index in traverse_tree(tree, root, **kwargs):
        if index in leaves:
            yield index


def get_tree_stats(
    tree: ApterTree,
    root: Optional[int] = None,
    **kwargs
) -> Dict[str, Any]:
    """Get statistics about a tree or one of its subtrees.

    Depths are relative to root.

    Returns:
        Dictionary with total_nodes, leaf_nodes, internal_nodes, max_depth,
        depths (node count per depth) and average_branching (mean number
        of visited children over visited nodes that have any)

    Example:
        >>> tree = ApterTree.from_arrays("rab", [None, 0, 0])
        >>> stats = get_tree_stats(tree)
        >>> stats['leaf_nodes'], stats['max_depth']
        (2, 1)
    """
    stats = {
        'total_nodes': 0,
        'leaf_nodes': 0,
        'max_depth': 0,
        'depths': {},
    }
    visited = set()

    for _, info in collect_tree_data(
        tree, root,
        data_requirement=DataRequirement.CHILDREN_COUNT,
        **kwargs
    ):
        depth = info['depth']
        visited.add(info['index'])
        stats['total_nodes'] += 1

        if info['is_leaf']:
            stats['leaf_nodes'] += 1

        stats['max_depth'] = max(stats['max_depth'], depth)
        stats['depths'][depth] = stats['depths'].get(depth, 0) + 1

    stats['internal_nodes'] = stats['total_nodes'] - stats['leaf_nodes']

    # Branching only counts edges between visited nodes, so depth limits
    # and filters don't leave unvisited children in the denominator.
    visited_children: Dict[int, int] = {}
    for index in visited:
        parent = tree.parent(index)
        if parent in visited:
            visited_children[parent] = visited_children.get(parent, 0) + 1
    stats['average_branching'] = (
        sum(visited_children.values()) / len(visited_children)
        if visited_children else 0
    )

    return stats


# Helper functions

def _parse_strategy(strategy: Union[TraversalStrategy, str]) -> TraversalStrategy:
    """Parse strategy from string or enum.

    Raises:
        ValueError: If the name is not a known strategy
    """
    if isinstance(strategy, TraversalStrategy):
        return strategy

    strategy_map = {
        'bfs': TraversalStrategy.BREADTH_FIRST,
        'breadth_first': TraversalStrategy.BREADTH_FIRST,
        'dfs': TraversalStrategy.DEPTH_FIRST_PRE,
        'dfs_pre': TraversalStrategy.DEPTH_FIRST_PRE,
        'depth_first_pre': TraversalStrategy.DEPTH_FIRST_PRE,
        'dfs_post': TraversalStrategy.DEPTH_FIRST_POST,
        'depth_first_post': TraversalStrategy.DEPTH_FIRST_POST,
        'level': TraversalStrategy.LEVEL_ORDER,
        'level_order': TraversalStrategy.LEVEL_ORDER,
    }

    strategy_lower = strategy.lower() if isinstance(strategy, str) else str(strategy)
    if strategy_lower in strategy_map:
        return strategy_map[strategy_lower]

    raise ValueError(f"Unknown traversal strategy: {strategy}")


def _build_config_from_kwargs(**kwargs) -> TraversalConfig:
    """Build TraversalConfig from keyword arguments."""
    config = TraversalConfig()

    if 'strategy' in kwargs:
        config.strategy = _parse_strategy(kwargs.pop('strategy'))

    if 'max_depth' in kwargs:
        config.depth.max_depth = kwargs.pop('max_depth')

    if 'min_depth' in kwargs:
        config.depth.min_depth = kwargs.pop('min_depth')

    if 'include_filter' in kwargs:
        config.filter.include_filter = kwargs.pop('include_filter')

    if 'exclude_filter' in kwargs:
        config.filter.exclude_filter = kwargs.pop('exclude_filter')

    if 'data_requirement' in kwargs:
        config.data_requirements = kwargs.pop('data_requirement')

    if 'on_error' in kwargs:
        config.on_error = kwargs.pop('on_error')
        config.skip_errors = config.on_error is not None

    _apply_options(config, kwargs)

    return config


def _apply_options(config: TraversalConfig, options: Dict[str, Any]) -> None:
    """Set the remaining keyword options on config.

    Raises:
        TypeError: If an option names no TraversalConfig field
    """
    config_fields = {f.name for f in fields(config)}

    for key, value in options.items():
        if key == 'specific_depths':
            config.depth.specific_depths = None if value is None else set(value)
        elif key == 'prune_on_exclude':
            config.filter.prune_on_exclude = value
        elif key in config_fields:
            setattr(config, key, value)
        else:
            raise TypeError(f"Unexpected traversal option: {key!r}")
