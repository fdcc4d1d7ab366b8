"""Core components of aptertree.

The ApterTree container plus the traversers and collectors that walk it.
"""

from .errors import (
    ApterTreeError,
    OutOfBoundsError,
    EmptyTreeError,
    InvalidParentError,
    NotALeafError,
    TreeStructureError,
    ConfigurationError,
)
from .node import TreeItem
from .tree import ApterTree, NO_PARENT
from .traverser import (
    TreeTraverser,
    BreadthFirstTraverser,
    DepthFirstPreOrderTraverser,
    DepthFirstPostOrderTraverser,
    LevelOrderTraverser,
    create_traverser,
)
from .collector import (
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

__all__ = [
    "ApterTreeError",
    "OutOfBoundsError",
    "EmptyTreeError",
    "InvalidParentError",
    "NotALeafError",
    "TreeStructureError",
    "ConfigurationError",
    "TreeItem",
    "ApterTree",
    "NO_PARENT",
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
]
