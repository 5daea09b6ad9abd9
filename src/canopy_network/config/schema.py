"""Plain-data snapshots of a topology and the difference between two of them."""
from dataclasses import dataclass, field, asdict
import json

from ..topology import Grove, IPAddress


@dataclass
class TopologySnapshot:
    """Adjacency of every tree in a grove, in canonical address text."""
    # One dict per tree: address -> ascending neighbour addresses
    trees: list[dict[str, list[str]]] = field(default_factory=list)

    @classmethod
    def from_grove(cls, grove: Grove) -> "TopologySnapshot":
        trees = []
        for tree in sorted(grove.trees(), key=lambda t: t.nodes()[0]):
            adjacency = tree.adjacency()
            trees.append({
                str(node): [str(neighbor) for neighbor in sorted(adjacency[node])]
                for node in sorted(adjacency)
            })
        return cls(trees=trees)

    @classmethod
    def from_network(cls, network) -> "TopologySnapshot":
        """Snapshot of a Network (anything exposing a ``grove``)."""
        return cls.from_grove(network.grove)

    def nodes(self) -> list[str]:
        """All addresses, ascending by address value."""
        found = {node for tree in self.trees for node in tree}
        return sorted(found, key=IPAddress.parse)

    def edges(self) -> set[tuple[str, str]]:
        """Every edge once, as an (lower, higher) address pair."""
        edges = set()
        for tree in self.trees:
            for node, neighbors in tree.items():
                for neighbor in neighbors:
                    pair = sorted((node, neighbor), key=IPAddress.parse)
                    edges.add((pair[0], pair[1]))
        return edges

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict) -> "TopologySnapshot":
        trees = [
            {node: list(neighbors) for node, neighbors in tree.items()}
            for tree in data.get("trees", [])
        ]
        return cls(trees=trees)


@dataclass
class TopologyDiff:
    """Difference between two topology snapshots."""
    changes: list[dict] = field(default_factory=list)

    def add_change(self, change_type: str, item_type: str, item_id: str):
        self.changes.append({
            "type": change_type,  # "added", "removed"
            "item_type": item_type,  # "node", "edge"
            "item_id": item_id,
        })

    def has_changes(self) -> bool:
        return len(self.changes) > 0

    def to_text(self) -> str:
        if not self.changes:
            return "No changes detected"

        lines = ["Topology diff:"]
        for change in self.changes:
            prefix = {"added": "+", "removed": "-"}.get(change["type"], "?")
            lines.append(f"  {prefix} {change['item_type']} {change['item_id']}")
        return "\n".join(lines)


def _edge_key(edge: tuple[str, str]) -> tuple[IPAddress, IPAddress]:
    return IPAddress.parse(edge[0]), IPAddress.parse(edge[1])


def diff_topologies(expected: TopologySnapshot, actual: TopologySnapshot) -> TopologyDiff:
    """Compare expected vs actual topology."""
    diff = TopologyDiff()

    expected_nodes = set(expected.nodes())
    actual_nodes = set(actual.nodes())
    for node in expected.nodes():
        if node not in actual_nodes:
            diff.add_change("removed", "node", node)
    for node in actual.nodes():
        if node not in expected_nodes:
            diff.add_change("added", "node", node)

    expected_edges = expected.edges()
    actual_edges = actual.edges()
    for first, second in sorted(expected_edges - actual_edges, key=_edge_key):
        diff.add_change("removed", "edge", f"{first}-{second}")
    for first, second in sorted(actual_edges - expected_edges, key=_edge_key):
        diff.add_change("added", "edge", f"{first}-{second}")

    return diff
