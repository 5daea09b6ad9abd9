"""Undirected graph over IPv4 addresses.

The graph is an adjacency map from address to the set of its neighbours.
Every copy in and out of the graph is deep, so neighbour sets are never
shared between two graph instances.
"""
import logging
from typing import Iterable, Mapping, Optional, Sequence

from .address import IPAddress
from .errors import CycleDetectedError, CycleFault

logger = logging.getLogger(__name__)

Adjacency = dict[IPAddress, set[IPAddress]]


def copy_adjacency(adjacency: Mapping[IPAddress, Iterable[IPAddress]]) -> Adjacency:
    """Deep copy of an adjacency map."""
    return {node: set(neighbors) for node, neighbors in adjacency.items()}


class UndirectedGraph:
    """Symmetric adjacency map without self-loops."""

    def __init__(self, adjacency: Optional[Mapping[IPAddress, Iterable[IPAddress]]] = None):
        self._adjacency: Adjacency = copy_adjacency(adjacency or {})
        # Only used while Grove.add merges several trees at once
        self.joined = False

    @classmethod
    def from_star(cls, root: IPAddress, children: Sequence[IPAddress]) -> "UndirectedGraph":
        """Build a graph of height 1: ``root`` connected to every child.

        Raises:
            ValueError: if ``children`` is empty.
            CycleDetectedError: if an address occurs twice among root and children.
        """
        if root is None:
            raise ValueError("Root address must not be None")
        if not children:
            raise ValueError(
                "The children list is empty, the root must connect to at least one node"
            )

        graph = cls()
        graph._add_node(root)
        for child in children:
            if child is None:
                raise ValueError("Child address must not be None")
            graph._add_node(child)
            graph._add_edge(root, child)
        return graph

    def _add_node(self, node: IPAddress) -> None:
        if node in self._adjacency:
            raise CycleDetectedError(CycleFault.DUPLICATE_NODE, node)
        self._adjacency[node] = set()

    def _add_edge(self, first: IPAddress, second: IPAddress) -> None:
        if second in self._adjacency[first] or first in self._adjacency[second]:
            raise CycleDetectedError(CycleFault.DUPLICATE_NODE, second)
        self._adjacency[first].add(second)
        self._adjacency[second].add(first)

    def merge(self, other: "UndirectedGraph") -> Optional["UndirectedGraph"]:
        """Structural union of two graphs that share at least one node.

        Neighbour sets of every common node are unioned; all other entries
        are taken over unchanged. The result is not checked for cycles,
        that is the job of Tree.is_tree().

        Returns:
            A new graph, or None if the graphs have no node in common.
        """
        if other is None:
            raise ValueError("Graph to merge must not be None")

        common = self._adjacency.keys() & other._adjacency.keys()
        if not common:
            return None

        merged = copy_adjacency(self._adjacency)
        incoming = copy_adjacency(other._adjacency)
        for node in common:
            incoming[node] |= merged[node]
        merged.update(incoming)

        logger.debug(f"Merged graphs over {len(common)} common node(s)")
        return UndirectedGraph(merged)

    def contains_node(self, node: IPAddress) -> bool:
        return node in self._adjacency

    def has_edge(self, first: IPAddress, second: IPAddress) -> bool:
        return second in self._adjacency.get(first, ())

    def nodes(self) -> list[IPAddress]:
        """All nodes, ascending."""
        return sorted(self._adjacency)

    def neighbors(self, node: IPAddress) -> list[IPAddress]:
        """Neighbours of ``node`` ascending, empty if the node is absent."""
        return sorted(self._adjacency.get(node, ()))

    def node_count(self) -> int:
        return len(self._adjacency)

    def adjacency(self) -> Adjacency:
        """Deep copy of the adjacency map."""
        return copy_adjacency(self._adjacency)

    def copy(self) -> "UndirectedGraph":
        return UndirectedGraph(self._adjacency)

    def __contains__(self, node: object) -> bool:
        return node in self._adjacency

    def __len__(self) -> int:
        return len(self._adjacency)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UndirectedGraph):
            return NotImplemented
        return self._adjacency == other._adjacency

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        edges = sum(len(neighbors) for neighbors in self._adjacency.values()) // 2
        return f"UndirectedGraph(nodes={len(self._adjacency)}, edges={edges})"
