"""Topology snapshots and the YAML inventory."""
from .schema import TopologySnapshot, TopologyDiff, diff_topologies
from .inventory import TopologyInventory

__all__ = ["TopologySnapshot", "TopologyDiff", "diff_topologies", "TopologyInventory"]
