"""Trees: undirected graphs that are connected and acyclic.

A Tree owns an UndirectedGraph and derives a rooted view from it on demand.
The rooted view is an arena of node records keyed by address (parent key,
ordered child keys, depth). It is cached together with a snapshot of the
adjacency map it was built from and rebuilt from scratch whenever the
snapshot or the requested root no longer match.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .address import IPAddress
from .errors import CycleDetectedError, CycleFault
from .graph import Adjacency, UndirectedGraph

logger = logging.getLogger(__name__)

MINIMUM_NODES = 2


@dataclass
class ViewNode:
    """One node of a rooted view."""
    parent: Optional[IPAddress]
    depth: int
    children: list[IPAddress] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass
class RootedView:
    """Parent/child derivation of an adjacency map relative to one root."""
    root: IPAddress
    snapshot: Adjacency
    nodes: dict[IPAddress, ViewNode] = field(default_factory=dict)


def build_view(root: IPAddress, adjacency: Adjacency) -> Optional[RootedView]:
    """Expand ``adjacency`` depth-first from ``root``.

    The edge back to the parent is removed from a working copy before a
    child gets expanded, so each undirected edge is consumed exactly once.
    Any edge left pointing at a node already in the view is a second path
    to that node.

    Returns:
        The rooted view, or None if the map is not connected.

    Raises:
        CycleDetectedError: on a revisit or an asymmetric edge.
    """
    working = {node: set(neighbors) for node, neighbors in adjacency.items()}
    view = RootedView(root=root, snapshot=adjacency)
    view.nodes[root] = ViewNode(parent=None, depth=0)

    stack = [root]
    while stack:
        current = stack.pop()
        record = view.nodes[current]
        for neighbor in sorted(working[current]):
            if neighbor in view.nodes:
                raise CycleDetectedError(CycleFault.REVISIT, neighbor)
            if current not in working.get(neighbor, ()):
                raise CycleDetectedError(CycleFault.ASYMMETRIC_EDGE, neighbor)

            working[neighbor].discard(current)
            view.nodes[neighbor] = ViewNode(parent=current, depth=record.depth + 1)
            record.children.append(neighbor)
        # Reversed so the lowest child is expanded first
        stack.extend(reversed(record.children))

    if len(view.nodes) != len(adjacency):
        logger.debug(
            f"Graph is not connected: reached {len(view.nodes)} of {len(adjacency)} nodes from {root}"
        )
        return None
    return view


class Tree:
    """A connected, acyclic undirected graph with an on-demand rooted view."""

    def __init__(self, graph: Optional[UndirectedGraph] = None):
        self._graph = graph.copy() if graph is not None else UndirectedGraph()
        self._view: Optional[RootedView] = None

    @classmethod
    def from_star(cls, root: IPAddress, children: Sequence[IPAddress]) -> "Tree":
        """Tree of height 1, see UndirectedGraph.from_star."""
        tree = cls()
        tree._graph = UndirectedGraph.from_star(root, children)
        return tree

    @classmethod
    def from_adjacency(cls, adjacency: Adjacency) -> "Tree":
        tree = cls()
        tree._graph = UndirectedGraph(adjacency)
        return tree

    # === Graph access ===

    @property
    def joined(self) -> bool:
        return self._graph.joined

    @joined.setter
    def joined(self, value: bool) -> None:
        self._graph.joined = value

    @property
    def graph(self) -> UndirectedGraph:
        """Deep copy of the underlying graph."""
        return self._graph.copy()

    def adjacency(self) -> Adjacency:
        return self._graph.adjacency()

    def contains_node(self, node: IPAddress) -> bool:
        return self._graph.contains_node(node)

    def nodes(self) -> list[IPAddress]:
        return self._graph.nodes()

    def node_count(self) -> int:
        return self._graph.node_count()

    def has_edge(self, first: IPAddress, second: IPAddress) -> bool:
        return self._graph.has_edge(first, second)

    def absorb(self, other: "Tree") -> bool:
        """Merge ``other`` into this tree in place.

        Returns:
            False if the two share no node. True otherwise, including the
            case where the merge adds nothing new.
        """
        merged = self._graph.merge(other._graph)
        if merged is None:
            return False
        if merged != self._graph:
            merged.joined = self._graph.joined
            self._graph = merged
        return True

    def copy(self) -> "Tree":
        """Deep copy with an empty rooted-view cache."""
        return Tree(self._graph)

    # === Rooted view ===

    def _is_view_current(self, root: IPAddress) -> bool:
        if self._view is None:
            return False
        return self._view.root == root and self._view.snapshot == self._graph.adjacency()

    def build_rooted_view(self, root: IPAddress) -> bool:
        """Build (or reuse) the rooted view at ``root``.

        Returns False and keeps the previous cache if the tree has fewer than
        two nodes, does not contain ``root`` or is not connected.

        Raises:
            CycleDetectedError: if the graph contains a cycle or a one-sided edge.
        """
        if root is None:
            raise ValueError("Root address must not be None")
        if self._graph.node_count() < MINIMUM_NODES or not self._graph.contains_node(root):
            return False
        if self._is_view_current(root):
            return True

        view = build_view(root, self._graph.adjacency())
        if view is None:
            return False
        self._view = view
        return True

    def is_tree(self) -> bool:
        """True if the graph is connected and acyclic."""
        if self._graph.node_count() < MINIMUM_NODES:
            return False
        try:
            return self.build_rooted_view(self._graph.nodes()[0])
        except CycleDetectedError as e:
            logger.debug(f"Not a tree: {e}")
            return False

    def _view_at(self, root: IPAddress) -> Optional[RootedView]:
        if self.build_rooted_view(root):
            return self._view
        return None

    # === Queries ===

    def height(self, root: IPAddress) -> int:
        """Longest distance from ``root`` to a leaf, 0 if absent."""
        view = self._view_at(root) if self.contains_node(root) else None
        if view is None:
            return 0
        return max(record.depth for record in view.nodes.values())

    def levels(self, root: IPAddress) -> list[list[IPAddress]]:
        """Nodes grouped by distance from ``root``, each level ascending."""
        if not self.contains_node(root):
            return []
        view = self._view_at(root)
        if view is None:
            return [[root]]

        levels: list[list[IPAddress]] = []
        for node, record in view.nodes.items():
            while len(levels) <= record.depth:
                levels.append([])
            levels[record.depth].append(node)
        return [sorted(level) for level in levels]

    def route(self, start: IPAddress, end: IPAddress) -> list[IPAddress]:
        """Path from ``start`` to ``end``, both inclusive."""
        if not (self.contains_node(start) and self.contains_node(end)):
            return []
        if start == end:
            return [start]
        view = self._view_at(start)
        if view is None or end not in view.nodes:
            return []

        route = [end]
        parent = view.nodes[end].parent
        while parent is not None:
            route.append(parent)
            parent = view.nodes[parent].parent
        route.reverse()
        return route

    def to_bracket_string(self, root: IPAddress) -> str:
        """Bracket notation of the tree seen from ``root``.

        A leaf renders as its address, an inner node as
        ``(address child1 child2 ...)`` with ascending children.
        """
        if not self.contains_node(root):
            return ""
        view = self._view_at(root)
        if view is None:
            return str(root)

        tokens: list[str] = []
        # Entries are (node, closing); a closing entry appends ")" to the last token
        stack: list[tuple[IPAddress, bool]] = [(root, False)]
        while stack:
            node, closing = stack.pop()
            if closing:
                tokens[-1] += ")"
                continue
            record = view.nodes[node]
            if record.is_leaf:
                tokens.append(str(node))
                continue
            tokens.append(f"({node}")
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(record.children))
        return " ".join(tokens)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tree):
            return NotImplemented
        return self._graph == other._graph

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Tree(nodes={[str(node) for node in self.nodes()]})"
