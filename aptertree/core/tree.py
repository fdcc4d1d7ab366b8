"""ApterTree - a tree stored as two parallel arrays.

An Apter tree keeps node values in one list and parent indices in another.
A node is nothing more than its position in those lists. The root stores
NO_PARENT as its parent, and every other node stores the index of a node
that was inserted before it, so parent indices are always smaller than the
index of their child.

That ordering is what keeps the structure cheap:
- insertion is an append to both lists
- walking up to the root can never loop
- all descendants of a node live after it, so child and subtree queries
  only need to scan the suffix of the arrays

No separate child index is maintained. Child lookup is a linear scan.
"""

import logging
from typing import (
    Any,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
)

from .errors import (
    EmptyTreeError,
    InvalidParentError,
    NotALeafError,
    OutOfBoundsError,
    TreeStructureError,
)
from .node import TreeItem

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Parent stored for the root node.
NO_PARENT = None


class ApterTree(Generic[T]):
    """Generic tree container backed by a value list and a parent list.

    Example:
        >>> tree = ApterTree()
        >>> tree.insert("root")
        0
        >>> tree.insert("a", 0)
        1
        >>> tree.insert("b", 0)
        2
        >>> list(tree.children(0))
        [1, 2]
        >>> tree.depth(2)
        1
    """

    def __init__(self):
        """Create an empty tree."""
        self._values: List[T] = []
        self._parents: List[Optional[int]] = []

    @classmethod
    def from_arrays(cls,
                    values: Iterable[T],
                    parents: Iterable[Optional[int]]) -> 'ApterTree[T]':
        """Build a tree from parallel value and parent sequences.

        Entries are inserted in order, so every parent reference is checked
        exactly as ``insert`` would check it.

        Args:
            values: Node values in index order
            parents: Parent index for each value (NO_PARENT for the root)

        Returns:
            New ApterTree holding the given nodes

        Raises:
            TreeStructureError: If the sequences differ in length
            InvalidParentError: If any parent reference is invalid
        """
        values = list(values)
        parents = list(parents)
        if len(values) != len(parents):
            raise TreeStructureError(
                f"Got {len(values)} values but {len(parents)} parent indices"
            )

        tree = cls()
        for value, parent in zip(values, parents):
            tree._check_parent(parent)
            tree._values.append(value)
            tree._parents.append(parent)

        logger.debug("Built tree with %d nodes from arrays", len(tree))
        return tree

    # Size

    def __len__(self) -> int:
        return len(self._parents)

    def is_empty(self) -> bool:
        """Return True if the tree has no nodes."""
        return not self._parents

    def keys(self) -> range:
        """Return the range of all node indices."""
        return range(len(self._parents))

    def __iter__(self) -> Iterator[int]:
        return iter(self.keys())

    # Validation helpers

    def _is_index(self, index: Any) -> bool:
        return (
            isinstance(index, int)
            and not isinstance(index, bool)
            and 0 <= index < len(self._parents)
        )

    def _check_index(self, index: Any) -> None:
        if not self._is_index(index):
            raise OutOfBoundsError(index, len(self._parents))

    def _check_parent(self, parent: Any) -> None:
        if parent is NO_PARENT:
            if self._parents:
                raise InvalidParentError(
                    parent, "Tree already has a root; a parent index is required"
                )
            return
        if not self._is_index(parent):
            raise InvalidParentError(
                parent,
                f"Parent {parent!r} is not a node of this tree (size {len(self._parents)})"
            )

    # Mutation

    def insert(self, value: T, parent: Optional[int] = NO_PARENT) -> int:
        """Append a node under the given parent.

        The first node inserted must be the root (parent NO_PARENT). Every
        later node must name a node that is already present.

        Args:
            value: Value to store
            parent: Index of the parent node, or NO_PARENT for the root

        Returns:
            Index of the new node

        Raises:
            InvalidParentError: If the parent reference is invalid. The tree
                is left unchanged.
        """
        self._check_parent(parent)
        self._values.append(value)
        self._parents.append(parent)
        index = len(self._parents) - 1
        logger.debug("Inserted node %d under parent %r", index, parent)
        return index

    def remove(self, index: int) -> T:
        """Remove a leaf node and return its value.

        Every node after ``index`` moves down one slot and parent references
        pointing past ``index`` are rewritten to match. Only nodes at or
        after ``index`` can hold such references, so only that suffix is
        rewritten.

        Args:
            index: Index of the leaf to remove

        Returns:
            The removed value

        Raises:
            OutOfBoundsError: If index is not a present node
            NotALeafError: If the node has children
        """
        self._check_index(index)
        if not self.is_leaf(index):
            raise NotALeafError(index)

        value = self._values.pop(index)
        del self._parents[index]

        parents = self._parents
        for i in range(index, len(parents)):
            parent = parents[i]
            if parent is not None and parent > index:
                parents[i] = parent - 1

        logger.debug("Removed leaf %d; %d nodes remain", index, len(parents))
        return value

    def clear(self) -> None:
        """Remove every node."""
        self._values.clear()
        self._parents.clear()

    # Value access

    def __getitem__(self, index: int) -> T:
        self._check_index(index)
        return self._values[index]

    def __setitem__(self, index: int, value: T) -> None:
        self._check_index(index)
        self._values[index] = value

    def get(self, index: int, default: Optional[T] = None) -> Optional[T]:
        """Return the value at index, or default if index is not a node."""
        if self._is_index(index):
            return self._values[index]
        return default

    def values(self) -> Iterator[T]:
        """Iterate over values in index order."""
        return iter(self._values)

    def items(self) -> Iterator[Tuple[int, T]]:
        """Iterate over (index, value) pairs in insertion order."""
        return enumerate(self._values)

    def item(self, index: int) -> TreeItem:
        """Return a TreeItem snapshot of the node at index."""
        self._check_index(index)
        return TreeItem(index, self._values[index], self._parents[index], self.depth(index))

    def find(self, value: Any) -> Optional[int]:
        """Return the index of the first node equal to value, or None."""
        for index, candidate in enumerate(self._values):
            if candidate == value:
                return index
        return None

    def parent_indices(self) -> Tuple[Optional[int], ...]:
        """Return a snapshot of the parent array."""
        return tuple(self._parents)

    # Structure queries

    def root(self) -> int:
        """Return the root index.

        Raises:
            EmptyTreeError: If the tree has no nodes
        """
        if not self._parents:
            raise EmptyTreeError()
        return 0

    def is_root(self, index: int) -> bool:
        self._check_index(index)
        return self._parents[index] is NO_PARENT

    def parent(self, index: int) -> Optional[int]:
        """Return the parent index of a node, or NO_PARENT for the root.

        Raises:
            OutOfBoundsError: If index is not a present node
        """
        self._check_index(index)
        return self._parents[index]

    def children(self, index: int) -> Iterator[int]:
        """Iterate lazily over the children of a node, in ascending order.

        Children always come after their parent, so only the suffix after
        ``index`` is scanned. Call again to restart.

        Raises:
            OutOfBoundsError: If index is not a present node
        """
        self._check_index(index)
        parents = self._parents
        return (i for i in range(index + 1, len(parents)) if parents[i] == index)

    def is_leaf(self, index: int) -> bool:
        return next(self.children(index), None) is None

    def leaves(self) -> Iterator[int]:
        """Iterate over every node that has no children."""
        has_children = set(self._parents)
        return (i for i in range(len(self._parents)) if i not in has_children)

    def siblings(self, index: int) -> Iterator[int]:
        """Iterate over the other children of this node's parent."""
        parent = self.parent(index)
        if parent is NO_PARENT:
            return iter(())
        return (i for i in self.children(parent) if i != index)

    def ancestors(self, index: int) -> Iterator[int]:
        """Iterate lazily from the parent of a node up to the root.

        The node itself is not included; the root is. Parent indices
        strictly decrease along the walk, so it always terminates.

        Raises:
            OutOfBoundsError: If index is not a present node
        """
        self._check_index(index)
        return self._walk_up(self._parents[index])

    def _walk_up(self, index: Optional[int]) -> Iterator[int]:
        parents = self._parents
        while index is not NO_PARENT:
            yield index
            index = parents[index]

    def depth(self, index: int) -> int:
        """Return the number of hops from a node to the root (root is 0)."""
        return sum(1 for _ in self.ancestors(index))

    def path(self, index: int) -> List[int]:
        """Return the indices from the root down to index, inclusive."""
        path = [index]
        path.extend(self.ancestors(index))
        path.reverse()
        return path

    def common_ancestor(self, a: int, b: int) -> int:
        """Return the lowest common ancestor of two nodes.

        A node counts as its own ancestor here, so the result is ``a`` when
        ``a`` is an ancestor of ``b``.
        """
        self._check_index(a)
        self._check_index(b)
        parents = self._parents
        # The larger index can never be an ancestor of the smaller one.
        while a != b:
            if a > b:
                a = parents[a]
            else:
                b = parents[b]
        return a

    def subtree(self, index: int) -> List[int]:
        """Return index and all of its descendants, in ascending order.

        One forward pass over positions >= index: a node belongs to the
        subtree exactly when its parent already does.

        Raises:
            OutOfBoundsError: If index is not a present node
        """
        self._check_index(index)
        parents = self._parents
        members = {index}
        result = [index]
        for i in range(index + 1, len(parents)):
            if parents[i] in members:
                members.add(i)
                result.append(i)
        return result

    def descendants(self, index: int) -> List[int]:
        """Return every node below index, excluding index itself."""
        return self.subtree(index)[1:]

    def child_lists(self, index: int) -> Dict[int, List[int]]:
        """Map every node in the subtree of index to its list of children.

        Built in the same single pass as ``subtree``. Useful when many child
        lookups are needed, since each ``children`` call is a fresh scan.

        Returns:
            Dict from node index to ascending list of child indices; leaves
            map to an empty list
        """
        self._check_index(index)
        parents = self._parents
        lists: Dict[int, List[int]] = {index: []}
        for i in range(index + 1, len(parents)):
            parent = parents[i]
            if parent in lists:
                lists[parent].append(i)
                lists[i] = []
        return lists

    def validate(self) -> None:
        """Check the tree invariants.

        Raises:
            TreeStructureError: If the arrays differ in length
            InvalidParentError: If a parent reference is out of order
        """
        if len(self._values) != len(self._parents):
            raise TreeStructureError(
                f"{len(self._values)} values but {len(self._parents)} parent indices"
            )
        for index, parent in enumerate(self._parents):
            if index == 0:
                if parent is not NO_PARENT:
                    raise InvalidParentError(parent, "Node 0 must be the root")
            elif not (isinstance(parent, int) and 0 <= parent < index):
                raise InvalidParentError(
                    parent, f"Node {index} has parent {parent!r}; expected 0 <= parent < {index}"
                )

    # Copying and comparison

    def copy(self) -> 'ApterTree[T]':
        """Return a shallow copy (values are shared, arrays are not)."""
        new = type(self)()
        new._values = list(self._values)
        new._parents = list(self._parents)
        return new

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApterTree):
            return NotImplemented
        return self._parents == other._parents and self._values == other._values

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(values={self._values!r}, parents={self._parents!r})"
