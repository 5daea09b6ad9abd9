"""canopy-network: forests of tree-shaped network topologies.

Addresses are IPv4 addresses, topologies are written in bracket notation:

    from canopy_network import Network

    net = Network.from_bracket_notation("(10.0.0.1 10.0.0.2 10.0.0.3)")
    net.get_levels("10.0.0.1")
"""

__version__ = "0.1.0"

from .topology import (
    BracketParser,
    CycleDetectedError,
    CycleFault,
    Grove,
    IPAddress,
    ParseError,
    ParseFault,
    TopologyError,
    Tree,
    UndirectedGraph,
)
from .network import Network
from .config import TopologyDiff, TopologyInventory, TopologySnapshot, diff_topologies

__all__ = [
    "Network",
    "IPAddress",
    "UndirectedGraph",
    "Tree",
    "Grove",
    "BracketParser",
    "TopologySnapshot",
    "TopologyDiff",
    "diff_topologies",
    "TopologyInventory",
    "TopologyError",
    "ParseError",
    "ParseFault",
    "CycleDetectedError",
    "CycleFault",
]
