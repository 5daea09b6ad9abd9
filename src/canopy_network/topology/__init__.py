"""Topology engine: addresses, graphs, trees, groves and the bracket parser.

Usage:
    from canopy_network.topology import BracketParser, Grove

    tree = BracketParser().parse("(10.0.0.1 (10.0.0.2 10.0.0.4) 10.0.0.3)")
    grove = Grove([tree])
    grove.connect(...)
"""

from .address import IPAddress
from .errors import (
    TopologyError,
    ParseError,
    ParseFault,
    CycleDetectedError,
    CycleFault,
)
from .graph import UndirectedGraph, copy_adjacency
from .tree import Tree, RootedView, ViewNode
from .grove import Grove
from .parser import BracketParser, parse_bracket_notation

__all__ = [
    # Keys
    "IPAddress",
    # Errors
    "TopologyError",
    "ParseError",
    "ParseFault",
    "CycleDetectedError",
    "CycleFault",
    # Structures
    "UndirectedGraph",
    "copy_adjacency",
    "Tree",
    "RootedView",
    "ViewNode",
    "Grove",
    # Parser
    "BracketParser",
    "parse_bracket_notation",
]
