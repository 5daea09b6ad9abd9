"""Groves: forests of disjoint trees.

A grove is never empty and no address appears in more than one of its
trees. Every operation that can fail works on copies of the trees and only
replaces the forest once it has fully succeeded.
"""
import logging
from typing import Iterable, Optional, Sequence

from .address import IPAddress
from .errors import CycleDetectedError, CycleFault
from .graph import Adjacency, UndirectedGraph
from .tree import Tree

logger = logging.getLogger(__name__)

MINIMUM_NODES_IN_TREE = 2
MINIMUM_TREES_IN_GROVE = 1


def _copy_trees(trees: Iterable[Tree]) -> list[Tree]:
    return [tree.copy() for tree in trees]


def _merge_pair(target: Tree, incoming: Tree) -> bool:
    """Merge ``incoming`` into ``target`` and validate the result.

    Returns:
        True if the trees share a node (``target`` is then marked joined).

    Raises:
        CycleDetectedError: if the merged graph is not a tree.
    """
    if not target.absorb(incoming):
        return False
    target.joined = True
    if not target.is_tree():
        raise CycleDetectedError(CycleFault.INVALID_MERGE)
    return True


def _consolidate(trees: list[Tree]) -> list[Tree]:
    """Re-merge joined trees until a pass makes no further merge.

    Trees that absorbed the same incoming tree now overlap; merging them
    can in turn make other survivors overlap, hence the loop.
    """
    while True:
        touched = [tree for tree in trees if tree.joined]
        for tree in trees:
            tree.joined = False
        if len(touched) <= 1:
            return trees

        untouched = [tree for tree in trees if all(tree is not t for t in touched)]
        survivors: list[Tree] = []
        for tree in touched:
            absorbed = False
            for survivor in survivors:
                if _merge_pair(survivor, tree):
                    absorbed = True
            if not absorbed:
                survivors.append(tree)
        trees = untouched + survivors


def _check_partition(trees: Iterable[Tree]) -> None:
    seen: set[IPAddress] = set()
    for tree in trees:
        if tree is None:
            raise ValueError("Tree must not be None")
        if tree.node_count() < MINIMUM_NODES_IN_TREE:
            raise ValueError(
                f"A tree in a grove needs at least {MINIMUM_NODES_IN_TREE} nodes, got {tree.node_count()}"
            )
        if not tree.is_tree():
            raise ValueError(f"{tree!r} is not connected and acyclic")
        for node in tree.nodes():
            if node in seen:
                raise CycleDetectedError(CycleFault.DUPLICATE_NODE, node)
            seen.add(node)


def _split_off(start: IPAddress, adjacency: Adjacency) -> Adjacency:
    """Move everything reachable from ``start`` out of ``adjacency``."""
    component: Adjacency = {}
    pending = [start]
    while pending:
        node = pending.pop()
        if node not in adjacency:
            continue
        neighbors = adjacency.pop(node)
        component[node] = neighbors
        pending.extend(neighbors)
    return component


class Grove:
    """A partitioned collection of trees."""

    def __init__(self, trees: Sequence[Tree]):
        """
        Raises:
            ValueError: if ``trees`` is empty or holds something that is not
                a tree of at least two nodes.
            CycleDetectedError: if two trees share an address.
        """
        if not trees:
            raise ValueError("A grove needs at least one tree")
        _check_partition(trees)
        self._forest: list[Tree] = _copy_trees(trees)

    @classmethod
    def from_star(cls, root: IPAddress, children: Sequence[IPAddress]) -> "Grove":
        return cls([Tree.from_star(root, children)])

    @classmethod
    def from_graph(cls, graph: UndirectedGraph) -> "Grove":
        if graph is None:
            raise ValueError("Graph must not be None")
        return cls([Tree(graph)])

    # === Queries ===

    def tree_containing(self, node: IPAddress) -> Optional[Tree]:
        """The live tree holding ``node``, or None."""
        for tree in self._forest:
            if tree.contains_node(node):
                return tree
        return None

    def contains(self, node: IPAddress) -> bool:
        return self.tree_containing(node) is not None

    def trees(self) -> list[Tree]:
        """Deep copies of all trees."""
        return _copy_trees(self._forest)

    def copy(self) -> "Grove":
        return Grove(self._forest)

    # === Mutations ===

    def connect(self, first: IPAddress, second: IPAddress) -> bool:
        """Add the edge ``first``-``second`` between two different trees.

        Connecting two nodes of the same tree would close a cycle and is
        rejected without trying.
        """
        if first == second:
            return False
        first_tree = self.tree_containing(first)
        second_tree = self.tree_containing(second)
        if first_tree is None or second_tree is None or first_tree is second_tree:
            return False

        combined = first_tree.adjacency()
        combined.update(second_tree.adjacency())
        combined[first].add(second)
        combined[second].add(first)

        self._forest = [
            tree for tree in self._forest
            if tree is not first_tree and tree is not second_tree
        ]
        self._forest.append(Tree.from_adjacency(combined))
        logger.debug(f"Connected {first} and {second}, grove has {len(self._forest)} tree(s)")
        return True

    def disconnect(self, first: IPAddress, second: IPAddress) -> bool:
        """Remove the edge ``first``-``second``.

        A node left without any connection is removed from the grove. The
        last edge of the only tree cannot be removed.
        """
        if first == second:
            return False
        tree = self.tree_containing(first)
        if tree is None or not tree.contains_node(second):
            return False

        if tree.node_count() == MINIMUM_NODES_IN_TREE:
            if len(self._forest) == MINIMUM_TREES_IN_GROVE:
                logger.debug(f"Refusing to remove the last edge {first}-{second}")
                return False
            self._forest = [t for t in self._forest if t is not tree]
            logger.debug(f"Removed tree {first}-{second}")
            return True

        if not tree.has_edge(first, second):
            return False

        adjacency = tree.adjacency()
        adjacency[first].discard(second)
        adjacency[second].discard(first)

        replacements: list[Tree] = []
        if not adjacency[first] or not adjacency[second]:
            isolated = first if not adjacency[first] else second
            del adjacency[isolated]
            replacements.append(Tree.from_adjacency(adjacency))
            logger.debug(f"Disconnected {first} and {second}, dropped isolated node {isolated}")
        else:
            component = _split_off(first, adjacency)
            replacements.append(Tree.from_adjacency(adjacency))
            replacements.append(Tree.from_adjacency(component))
            logger.debug(f"Disconnected {first} and {second}, split tree in two")

        self._forest = [t for t in self._forest if t is not tree] + replacements
        return True

    def add(self, other: "Grove") -> bool:
        """Merge every tree of ``other`` into this grove.

        Trees sharing addresses are merged; trees sharing none are copied
        over. This grove only changes if every merge yields a valid tree.

        Returns:
            True if the grove changed, False if it already held everything.

        Raises:
            CycleDetectedError: if a merge would create a cycle. The grove
                is left unchanged.
        """
        if other is None:
            raise ValueError("Grove to add must not be None")
        if self == other:
            return False

        working = _copy_trees(self._forest)
        incoming = _copy_trees(other._forest)

        for tree in working:
            for candidate in incoming:
                if _merge_pair(tree, candidate):
                    candidate.joined = True

        working.extend(tree for tree in incoming if not tree.joined)
        for tree in incoming:
            tree.joined = False
        working = _consolidate(working)

        if _canonical(working) == _canonical(self._forest):
            return False
        self._forest = working
        logger.debug(f"Added grove, now {len(self._forest)} tree(s)")
        return True

    def __len__(self) -> int:
        return len(self._forest)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grove):
            return NotImplemented
        return _canonical(self._forest) == _canonical(other._forest)

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Grove(trees={len(self._forest)}, nodes={sum(t.node_count() for t in self._forest)})"

    # Defined last: the name shadows the builtin inside the class body
    def list(self) -> list[IPAddress]:
        """Every address in the grove, ascending."""
        nodes = []
        for tree in self._forest:
            nodes.extend(tree.nodes())
        return sorted(nodes)


def _canonical(trees: Iterable[Tree]) -> list[Adjacency]:
    """Adjacency maps of ``trees`` in a stable order, for comparison."""
    ordered = sorted(
        (tree for tree in trees if tree.node_count()),
        key=lambda tree: tree.nodes()[0],
    )
    return [tree.adjacency() for tree in ordered]
