"""
tree_evolution/tree.py - Generic ordered tree with positional addressing
"""
import copy
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

# Path of child indices from the root; () addresses the root itself
Position = Tuple[int, ...]

# Default for Tree.random_position: accept nodes of any kind
ANY_KIND = object()


class OutOfBoundsError(IndexError):
    """A position references a child index that does not exist"""

    def __init__(self, position: Sequence[int], depth: int, n_children: int):
        self.position = tuple(position)
        self.depth = depth
        super().__init__(
            f"Position {self.position} is out of bounds at depth {depth}: "
            f"index {self.position[depth]} but node has {n_children} children"
        )


class Tree:
    """A node payload plus an ordered list of owned child trees

    The optional ``kind`` tag distinguishes typed subtrees (e.g. a boolean
    valued subtree from a numeric one) and is orthogonal to the payload.
    A tree never shares structure with another tree: anything installed
    through ``replace`` is deep-copied first.
    """

    def __init__(self, node: Any, kind: Any = None, children: Optional[List['Tree']] = None):
        self.node = node
        self.kind = kind
        self.children = list(children) if children is not None else []

    def add(self, child: 'Tree') -> None:
        """Append a child, taking ownership of it"""
        self.children.append(child)

    def get_node(self) -> Any:
        return self.node

    def get_kind(self) -> Any:
        return self.kind

    def get_children(self) -> Tuple['Tree', ...]:
        """Read-only view of the immediate children"""
        return tuple(self.children)

    def _descend(self, position: Sequence[int], levels: int) -> 'Tree':
        """Walk the first ``levels`` indices of ``position``"""
        current = self
        for depth in range(levels):
            index = position[depth]
            if not 0 <= index < len(current.children):
                raise OutOfBoundsError(position, depth, len(current.children))
            current = current.children[index]
        return current

    def get_subtree(self, position: Sequence[int]) -> 'Tree':
        """Return the subtree at ``position`` (the tree itself for ())"""
        return self._descend(position, len(position))

    def replace(self, position: Sequence[int], newtree: 'Tree') -> None:
        """Install a deep copy of ``newtree`` at ``position``

        The previous subtree at that position is discarded. For the empty
        position the node itself takes the payload, kind and children of the
        copy.
        """
        # Copy first so that installing a tree into itself is well defined
        replacement = newtree.copy()
        if len(position) == 0:
            self.node = replacement.node
            self.kind = replacement.kind
            self.children = replacement.children
            return

        parent = self._descend(position, len(position) - 1)
        index = position[-1]
        if not 0 <= index < len(parent.children):
            raise OutOfBoundsError(position, len(position) - 1, len(parent.children))
        parent.children[index] = replacement

    def visit(self, visitor: Callable[['Tree', Position], None]) -> None:
        """Apply ``visitor(node, position)`` to every node in pre-order

        Root first, then children strictly left to right, depth first.
        """
        stack = [(self, ())]
        while stack:
            tree, position = stack.pop()
            visitor(tree, position)
            for i in range(len(tree.children) - 1, -1, -1):
                stack.append((tree.children[i], position + (i,)))

    def positions(self) -> List[Position]:
        """All positions in pre-order"""
        result = []
        self.visit(lambda tree, position: result.append(position))
        return result

    def random_position(self, kind: Any = ANY_KIND, rng=None):
        """Uniformly random ``(found, position)``, optionally restricted to a kind

        ``kind=None`` matches untagged nodes; leave it out to accept every node.
        """
        from .sampling import kind_filter, random_position

        if kind is ANY_KIND:
            return random_position(self, rng=rng)
        return random_position(self, kind_filter(kind), rng=rng)

    def copy(self) -> 'Tree':
        """Create a deep copy of this tree"""
        root = Tree(copy.deepcopy(self.node), self.kind)
        stack = [(self, root)]
        while stack:
            source, target = stack.pop()
            for child in source.children:
                child_copy = Tree(copy.deepcopy(child.node), child.kind)
                target.children.append(child_copy)
                stack.append((child, child_copy))
        return root

    def __copy__(self) -> 'Tree':
        return self.copy()

    def __deepcopy__(self, memo) -> 'Tree':
        return self.copy()

    def get_all_nodes(self) -> List['Tree']:
        """Get all nodes of this tree in pre-order"""
        nodes = []
        self.visit(lambda tree, position: nodes.append(tree))
        return nodes

    def size(self) -> int:
        return len(self.get_all_nodes())

    def depth(self) -> int:
        """Maximum depth of this tree, a single node having depth 1"""
        deepest = 0
        stack = [(self, 1)]
        while stack:
            tree, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in tree.children)
        return deepest

    def _node_dict(self) -> Dict[str, Any]:
        kind = self.kind
        if hasattr(kind, 'value'):
            kind = kind.value
        return {'node': self.node, 'kind': kind, 'children': []}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary"""
        root = self._node_dict()
        stack = [(self, root)]
        while stack:
            tree, data = stack.pop()
            for child in tree.children:
                child_data = child._node_dict()
                data['children'].append(child_data)
                stack.append((child, child_data))
        return root

    @classmethod
    def _from_node_dict(cls, data: Any, kind_type: Optional[Callable]) -> 'Tree':
        if not isinstance(data, dict) or 'node' not in data:
            raise ValueError(f"Not a serialized tree: {data!r}")
        kind = data.get('kind')
        if kind is not None and kind_type is not None:
            kind = kind_type(kind)
        return cls(data['node'], kind)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], kind_type: Optional[Callable] = None) -> 'Tree':
        """Deserialize from dictionary, rebuilding kinds with ``kind_type``"""
        root = cls._from_node_dict(data, kind_type)
        stack = [(data, root)]
        while stack:
            node_data, tree = stack.pop()
            children = node_data.get('children', [])
            if not isinstance(children, list):
                raise ValueError(f"Children must be a list, got {type(children).__name__}")
            for child_data in children:
                child = cls._from_node_dict(child_data, kind_type)
                tree.children.append(child)
                stack.append((child_data, child))
        return root

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tree):
            return NotImplemented
        stack = [(self, other)]
        while stack:
            a, b = stack.pop()
            if (a.node != b.node or a.kind != b.kind
                    or len(a.children) != len(b.children)):
                return False
            stack.extend(zip(a.children, b.children))
        return True

    __hash__ = None

    def __str__(self) -> str:
        # Markers between nodes are plain strings, nodes are Trees
        parts = []
        stack = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
                continue
            parts.append(f"{item.node}(")
            stack.append(")")
            for child in reversed(item.children):
                stack.append(",")
                stack.append(child)
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Tree({str(self)!r})"
