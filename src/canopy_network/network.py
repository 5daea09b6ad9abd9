"""Network facade over a grove of tree topologies.

A Network always holds at least one tree topology. It is the entry point
consumers use: construction from a star or from bracket notation, merging
subnets, connecting and disconnecting nodes, and structural queries.

Usage:
    from canopy_network import Network

    net = Network.from_bracket_notation("(10.0.0.1 (10.0.0.2 10.0.0.4) 10.0.0.3)")
    net.get_route("10.0.0.4", "10.0.0.3")
    # [10.0.0.4, 10.0.0.2, 10.0.0.1, 10.0.0.3]
"""
import logging
from typing import Optional, Sequence, Union

from .topology import BracketParser, Grove, IPAddress, Tree
from .utils.logging_config import timed

logger = logging.getLogger(__name__)

AddressLike = Union[IPAddress, str]


def to_address(value: AddressLike) -> IPAddress:
    """Accept an IPAddress or its point notation.

    Raises:
        ParseError: if a string is not a valid address.
        TypeError: for anything else.
    """
    if isinstance(value, IPAddress):
        return value
    if not isinstance(value, str):
        raise TypeError(f"Expected an IPAddress or its text, got {type(value).__name__}")
    return IPAddress.parse(value)


class Network:
    """One or more disjoint tree topologies addressed by IPv4 addresses."""

    def __init__(self, grove: Grove):
        if grove is None:
            raise ValueError("Grove must not be None")
        self._grove = grove.copy()

    @classmethod
    def from_star(cls, root: AddressLike, children: Sequence[AddressLike]) -> "Network":
        """Network with one tree of height 1: ``root`` connected to each child."""
        if root is None or children is None:
            raise ValueError("Root and children must not be None")
        if any(child is None for child in children):
            raise ValueError("Child address must not be None")
        return cls(Grove.from_star(to_address(root), [to_address(c) for c in children]))

    @classmethod
    @timed("parse")
    def from_bracket_notation(cls, bracket_notation: Optional[str]) -> "Network":
        """Network with the single tree described by ``bracket_notation``.

        Raises:
            ParseError: if the notation is malformed.
        """
        tree = BracketParser().parse(bracket_notation)
        return cls(Grove([tree]))

    @property
    def grove(self) -> Grove:
        """Deep copy of the underlying grove."""
        return self._grove.copy()

    def _tree_with(self, address: IPAddress) -> Optional[Tree]:
        return self._grove.tree_containing(address)

    @timed("add")
    def add(self, subnet: Optional["Network"]) -> bool:
        """Copy the trees of ``subnet`` into this network.

        Trees that share addresses are merged.

        Returns:
            True if this network changed.

        Raises:
            CycleDetectedError: if merging would create a cycle; the network
                is left unchanged.
        """
        if subnet is None:
            return False
        changed = self._grove.add(subnet._grove)
        if changed:
            logger.info(f"Added subnet, network now has {len(self._grove)} tree(s)")
        return changed

    @timed("connect")
    def connect(self, first: Optional[AddressLike], second: Optional[AddressLike]) -> bool:
        """Connect two nodes that are in different trees."""
        if first is None or second is None:
            return False
        first, second = to_address(first), to_address(second)
        if first == second:
            return False
        return self._grove.connect(first, second)

    @timed("disconnect")
    def disconnect(self, first: Optional[AddressLike], second: Optional[AddressLike]) -> bool:
        """Remove the connection between two nodes.

        Nodes left without connections are removed. The very last connection
        of the network cannot be removed.
        """
        if first is None or second is None:
            return False
        first, second = to_address(first), to_address(second)
        if first == second:
            return False
        return self._grove.disconnect(first, second)

    def contains(self, address: Optional[AddressLike]) -> bool:
        if address is None:
            return False
        return self._grove.contains(to_address(address))

    def get_height(self, root: Optional[AddressLike]) -> int:
        """Height of the tree holding ``root`` when hung from ``root``; 0 if absent."""
        if not self.contains(root):
            return 0
        root = to_address(root)
        return self._tree_with(root).height(root)

    def get_levels(self, root: Optional[AddressLike]) -> list[list[IPAddress]]:
        """Addresses per level below ``root``, each level ascending."""
        if not self.contains(root):
            return []
        root = to_address(root)
        return self._tree_with(root).levels(root)

    @timed("route")
    def get_route(self, start: Optional[AddressLike], end: Optional[AddressLike]) -> list[IPAddress]:
        """Addresses on the path from ``start`` to ``end``, both inclusive.

        Empty if either address is absent, they are equal, or they live in
        different trees.
        """
        if not (self.contains(start) and self.contains(end)):
            return []
        start, end = to_address(start), to_address(end)
        if start == end:
            return []
        return self._tree_with(start).route(start, end)

    def to_bracket_string(self, root: Optional[AddressLike]) -> str:
        """Bracket notation of the tree holding ``root``; "" if absent."""
        if not self.contains(root):
            return ""
        root = to_address(root)
        return self._tree_with(root).to_bracket_string(root)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Network):
            return NotImplemented
        return self._grove == other._grove

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Network({self._grove!r})"

    # Defined last: the name shadows the builtin inside the class body
    def list(self) -> list[IPAddress]:
        """All addresses in ascending order."""
        return self._grove.list()
