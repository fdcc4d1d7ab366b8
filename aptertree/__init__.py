"""aptertree - Apter trees for Python.

An Apter tree stores a tree as two parallel lists: node values and parent
indices. Nodes are plain integer indices, insertion is an append, and
because every parent is inserted before its children all queries are
simple scans over the arrays.

Container:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from aptertree import ApterTree
    tree = ApterTree()
    root = tree.insert("root")
    tree.insert("a", root)
━━━━━━━━━━━━━━━━━━━━━━━━━━

Traversal:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from aptertree import traverse_tree, collect_tree_data
    for index in traverse_tree(tree, strategy="dfs_pre", max_depth=2):
        ...
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from .core import (
    ApterTree,
    NO_PARENT,
    TreeItem,
    ApterTreeError,
    OutOfBoundsError,
    EmptyTreeError,
    InvalidParentError,
    NotALeafError,
    TreeStructureError,
    ConfigurationError,
    TreeTraverser,
    BreadthFirstTraverser,
    DepthFirstPreOrderTraverser,
    DepthFirstPostOrderTraverser,
    LevelOrderTraverser,
    create_traverser,
    DataCollector,
    IndexCollector,
    ValueCollector,
    FullNodeCollector,
    ChildCountCollector,
    PathCollector,
    AggregateCollector,
    SumCollector,
    MaxCollector,
    CustomCollector,
)
from .config import (
    TraversalConfig,
    TraversalStrategy,
    DataRequirement,
    FilterConfig,
    DepthConfig,
)
from .planning import ExecutionPlan
from .api import (
    traverse_tree,
    collect_tree_data,
    count_nodes,
    find_nodes,
    get_tree_paths,
    get_leaf_nodes,
    get_tree_stats,
)

__all__ = [
    "__version__",
    # Container
    "ApterTree",
    "NO_PARENT",
    "TreeItem",
    # Errors
    "ApterTreeError",
    "OutOfBoundsError",
    "EmptyTreeError",
    "InvalidParentError",
    "NotALeafError",
    "TreeStructureError",
    "ConfigurationError",
    # Traversal
    "TreeTraverser",
    "BreadthFirstTraverser",
    "DepthFirstPreOrderTraverser",
    "DepthFirstPostOrderTraverser",
    "LevelOrderTraverser",
    "create_traverser",
    "DataCollector",
    "IndexCollector",
    "ValueCollector",
    "FullNodeCollector",
    "ChildCountCollector",
    "PathCollector",
    "AggregateCollector",
    "SumCollector",
    "MaxCollector",
    "CustomCollector",
    # Config and planning
    "TraversalConfig",
    "TraversalStrategy",
    "DataRequirement",
    "FilterConfig",
    "DepthConfig",
    "ExecutionPlan",
    # API
    "traverse_tree",
    "collect_tree_data",
    "count_nodes",
    "find_nodes",
    "get_tree_paths",
    "get_leaf_nodes",
    "get_tree_stats",
]
