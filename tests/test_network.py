"""Tests for the Network facade."""
import logging

import pytest
from canopy_network import CycleDetectedError, IPAddress, Network, ParseError


def addresses(*texts):
    return [IPAddress.parse(text) for text in texts]


@pytest.fixture
def network():
    """10.0.0.1 - (10.0.0.2 - 10.0.0.4, 10.0.0.3)"""
    return Network.from_bracket_notation("(10.0.0.1 (10.0.0.2 10.0.0.4) 10.0.0.3)")


class TestConstruction:

    def test_from_star_with_strings(self):
        net = Network.from_star("10.0.0.1", ["10.0.0.2", "10.0.0.3"])
        assert net.list() == addresses("10.0.0.1", "10.0.0.2", "10.0.0.3")

    def test_from_star_with_addresses(self):
        root, child = addresses("10.0.0.1", "10.0.0.2")
        assert Network.from_star(root, [child]) == Network.from_star("10.0.0.1", ["10.0.0.2"])

    def test_from_star_none(self):
        with pytest.raises(ValueError):
            Network.from_star(None, ["10.0.0.2"])
        with pytest.raises(ValueError):
            Network.from_star("10.0.0.1", None)

    def test_from_star_empty_children(self):
        with pytest.raises(ValueError):
            Network.from_star("10.0.0.1", [])

    def test_from_bracket_notation_invalid(self):
        with pytest.raises(ParseError):
            Network.from_bracket_notation("(10.0.0.1 10.0.0.1)")

    def test_grove_is_copy(self, network):
        grove = network.grove
        grove.connect(IPAddress.parse("10.0.0.4"), IPAddress.parse("10.0.0.3"))
        assert network.get_height("10.0.0.1") == 2


class TestQueries:

    def test_list(self, network):
        assert network.list() == addresses("10.0.0.1", "10.0.0.2", "10.0.0.3", "10.0.0.4")

    def test_contains(self, network):
        assert network.contains("10.0.0.4")
        assert not network.contains("10.0.0.9")
        assert not network.contains(None)

    def test_height(self, network):
        assert network.get_height("10.0.0.1") == 2
        assert network.get_height("10.0.0.4") == 3
        assert network.get_height("10.0.0.9") == 0

    def test_levels(self, network):
        assert network.get_levels("10.0.0.1") == [
            addresses("10.0.0.1"),
            addresses("10.0.0.2", "10.0.0.3"),
            addresses("10.0.0.4"),
        ]
        assert network.get_levels("10.0.0.9") == []

    def test_route(self, network):
        assert network.get_route("10.0.0.4", "10.0.0.3") == addresses(
            "10.0.0.4", "10.0.0.2", "10.0.0.1", "10.0.0.3"
        )

    def test_route_to_itself_is_empty(self, network):
        assert network.get_route("10.0.0.1", "10.0.0.1") == []

    def test_route_between_trees_is_empty(self, network):
        network.add(Network.from_star("10.0.1.1", ["10.0.1.2"]))
        assert network.get_route("10.0.0.1", "10.0.1.1") == []

    def test_route_missing_node(self, network):
        assert network.get_route("10.0.0.1", "10.0.0.9") == []
        assert network.get_route(None, "10.0.0.1") == []

    def test_bracket_string(self, network):
        assert network.to_bracket_string("10.0.0.2") == (
            "(10.0.0.2 (10.0.0.1 10.0.0.3) 10.0.0.4)"
        )
        assert network.to_bracket_string("10.0.0.9") == ""

    def test_invalid_address_text(self, network):
        with pytest.raises(ParseError):
            network.contains("10.0.0")

    @pytest.mark.parametrize("value", [167772161, 10.0, ("10.0.0.1",)])
    def test_non_text_address_rejected(self, network, value):
        """Only IPAddress objects and their text are accepted as keys."""
        with pytest.raises(TypeError):
            network.contains(value)
        with pytest.raises(TypeError):
            network.connect(value, "10.0.0.1")


class TestMutations:

    def test_add(self, network):
        assert network.add(Network.from_star("10.0.0.3", ["10.0.0.5"]))
        assert network.get_height("10.0.0.1") == 2
        assert network.contains("10.0.0.5")

    def test_add_none(self, network):
        assert not network.add(None)

    def test_add_existing(self, network):
        assert not network.add(Network.from_star("10.0.0.1", ["10.0.0.2"]))

    def test_add_cycle_leaves_network_unchanged(self, network):
        before = network.list()

        with pytest.raises(CycleDetectedError):
            network.add(Network.from_star("10.0.0.4", ["10.0.0.3"]))

        assert network.list() == before
        assert network.get_route("10.0.0.4", "10.0.0.3") == addresses(
            "10.0.0.4", "10.0.0.2", "10.0.0.1", "10.0.0.3"
        )

    def test_connect_and_disconnect(self, network):
        network.add(Network.from_star("10.0.1.1", ["10.0.1.2"]))

        assert network.connect("10.0.0.3", "10.0.1.1")
        assert network.get_route("10.0.0.4", "10.0.1.2") == addresses(
            "10.0.0.4", "10.0.0.2", "10.0.0.1", "10.0.0.3", "10.0.1.1", "10.0.1.2"
        )

        assert network.disconnect("10.0.0.3", "10.0.1.1")
        assert network.get_route("10.0.0.4", "10.0.1.2") == []

    def test_connect_rejections(self, network):
        assert not network.connect(None, "10.0.0.1")
        assert not network.connect("10.0.0.1", "10.0.0.1")
        assert not network.connect("10.0.0.4", "10.0.0.3")

    def test_disconnect_rejections(self, network):
        assert not network.disconnect("10.0.0.1", None)
        assert not network.disconnect("10.0.0.2", "10.0.0.2")
        assert not network.disconnect("10.0.0.4", "10.0.0.3")

    def test_disconnect_last_edge(self):
        net = Network.from_star("10.0.0.1", ["10.0.0.2"])
        assert not net.disconnect("10.0.0.1", "10.0.0.2")
        assert net.contains("10.0.0.1")

    def test_operations_are_timed(self, network, caplog):
        with caplog.at_level(logging.INFO, logger="canopy.perf"):
            network.get_route("10.0.0.4", "10.0.0.3")
        assert any("route" in record.getMessage() for record in caplog.records)
