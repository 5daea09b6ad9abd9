"""Tests for topology snapshots and diffs."""
import json

import pytest
from canopy_network import Network
from canopy_network.config.schema import (
    TopologyDiff,
    TopologySnapshot,
    diff_topologies,
)


@pytest.fixture
def network():
    return Network.from_bracket_notation("(10.0.0.1 (10.0.0.2 10.0.0.10) 10.0.0.3)")


class TestTopologySnapshot:
    """Tests for TopologySnapshot."""

    def test_from_network(self, network):
        """Snapshot holds every tree with ascending neighbours."""
        snapshot = TopologySnapshot.from_network(network)
        assert snapshot.trees == [{
            "10.0.0.1": ["10.0.0.2", "10.0.0.3"],
            "10.0.0.2": ["10.0.0.1", "10.0.0.10"],
            "10.0.0.3": ["10.0.0.1"],
            "10.0.0.10": ["10.0.0.2"],
        }]

    def test_trees_ordered_by_lowest_address(self, network):
        network.add(Network.from_star("9.0.0.1", ["9.0.0.2"]))
        snapshot = TopologySnapshot.from_network(network)
        assert list(snapshot.trees[0]) == ["9.0.0.1", "9.0.0.2"]

    def test_nodes_sorted_by_value(self, network):
        """10.0.0.10 sorts after 10.0.0.3."""
        snapshot = TopologySnapshot.from_network(network)
        assert snapshot.nodes() == ["10.0.0.1", "10.0.0.2", "10.0.0.3", "10.0.0.10"]

    def test_edges(self, network):
        snapshot = TopologySnapshot.from_network(network)
        assert snapshot.edges() == {
            ("10.0.0.1", "10.0.0.2"),
            ("10.0.0.1", "10.0.0.3"),
            ("10.0.0.2", "10.0.0.10"),
        }

    def test_json_round_trip(self, network):
        snapshot = TopologySnapshot.from_network(network)
        data = json.loads(snapshot.to_json())
        assert TopologySnapshot.from_dict(data) == snapshot

    def test_from_dict_empty(self):
        assert TopologySnapshot.from_dict({}).trees == []


class TestTopologyDiff:
    """Tests for diff_topologies."""

    def test_no_changes(self, network):
        snapshot = TopologySnapshot.from_network(network)
        diff = diff_topologies(snapshot, snapshot)
        assert not diff.has_changes()
        assert diff.to_text() == "No changes detected"

    def test_added_node_and_edge(self, network):
        expected = TopologySnapshot.from_network(network)
        network.add(Network.from_star("10.0.0.3", ["10.0.0.4"]))
        actual = TopologySnapshot.from_network(network)

        diff = diff_topologies(expected, actual)

        assert diff.changes == [
            {"type": "added", "item_type": "node", "item_id": "10.0.0.4"},
            {"type": "added", "item_type": "edge", "item_id": "10.0.0.3-10.0.0.4"},
        ]

    def test_removed_edge_keeps_nodes(self):
        """Splitting a tree removes an edge but no node."""
        network = Network.from_bracket_notation("(10.0.0.1 (10.0.0.2 10.0.0.3) 10.0.0.4)")
        expected = TopologySnapshot.from_network(network)
        assert network.disconnect("10.0.0.1", "10.0.0.2")

        diff = diff_topologies(expected, TopologySnapshot.from_network(network))

        assert diff.changes == [
            {"type": "removed", "item_type": "edge", "item_id": "10.0.0.1-10.0.0.2"},
        ]

    def test_to_text(self):
        diff = TopologyDiff()
        diff.add_change("removed", "node", "10.0.0.4")
        diff.add_change("added", "edge", "10.0.0.1-10.0.0.5")

        assert diff.to_text() == (
            "Topology diff:\n"
            "  - node 10.0.0.4\n"
            "  + edge 10.0.0.1-10.0.0.5"
        )
