"""Topology inventory management from YAML configuration."""
import logging
import os
from pathlib import Path
from typing import Optional

import yaml

from ..network import Network
from ..utils.logging_config import timed_section_sync

logger = logging.getLogger(__name__)


class TopologyInventory:
    """Named network topologies loaded from YAML config.

    A network is either a bracket notation string or a mapping with a
    ``topology`` key. Groups name several networks that are merged into
    one when built:

    ```yaml
    defaults:
      description: "lab"
    networks:
      core: "(10.0.0.1 10.0.0.2 10.0.0.3)"
      edge:
        topology: "(10.0.0.3 10.0.0.4)"
        description: "edge uplink"
    groups:
      backbone:
        - core
        - edge
    ```
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or self._find_config()
        self._config: dict = {}
        self._networks: dict[str, Network] = {}
        self._load_config()

    def _find_config(self) -> str:
        """Find the topologies.yaml config file."""
        env_path = os.environ.get("CANOPY_INVENTORY")
        if env_path:
            return env_path

        search_paths = [
            Path.cwd() / "configs" / "topologies.yaml",
            Path.cwd() / "topologies.yaml",
            Path.home() / ".config" / "canopy-network" / "topologies.yaml",
        ]

        for path in search_paths:
            if path.exists():
                return str(path)

        raise FileNotFoundError(
            "Could not find topologies.yaml. Create one in ./configs/topologies.yaml"
        )

    def _load_config(self) -> None:
        """Load the YAML configuration."""
        with open(self.config_path) as f:
            self._config = yaml.safe_load(f) or {}

        # Normalize the short form and apply defaults
        defaults = self._config.get("defaults") or {}
        networks = self._config.get("networks") or {}
        for name, network_config in list(networks.items()):
            if isinstance(network_config, str):
                network_config = {"topology": network_config}
                networks[name] = network_config
            for key, value in defaults.items():
                if key not in network_config:
                    network_config[key] = value
        self._config["networks"] = networks

        self._validate_groups()

    def get_network_names(self) -> list[str]:
        """Get all network names."""
        return list(self._config.get("networks", {}).keys())

    def get_network_config(self, name: str) -> dict:
        """Get raw config for a network."""
        networks = self._config.get("networks", {})
        if name not in networks:
            raise KeyError(f"Unknown network: {name}")
        return networks[name]

    def get_network(self, name: str) -> Network:
        """Build (once) and return a copy of a named network.

        Raises:
            KeyError: If the network is not defined
            ParseError: If its topology is not valid bracket notation
        """
        if name not in self._networks:
            config = self.get_network_config(name)
            if "topology" not in config:
                raise KeyError(f"Network '{name}' has no topology")
            self._networks[name] = Network.from_bracket_notation(config["topology"])
            logger.debug(f"Built network '{name}'")
        return Network(self._networks[name].grove)

    # === Group Management ===

    def _validate_groups(self) -> None:
        """Validate that all group members reference valid networks."""
        groups = self._config.get("groups") or {}
        networks = self._config.get("networks", {})

        for group_name, members in groups.items():
            if not isinstance(members, list):
                logger.warning(f"Group '{group_name}' should be a list of network names")
                continue
            for name in members:
                if name not in networks:
                    logger.warning(
                        f"Group '{group_name}' references unknown network: {name}"
                    )

    def get_groups(self) -> dict[str, list[str]]:
        """Get all defined groups and their members."""
        return dict(self._config.get("groups") or {})

    def get_group_members(self, group_name: str) -> list[str]:
        """Get network names in a group.

        Raises:
            KeyError: If group doesn't exist
        """
        groups = self._config.get("groups") or {}
        if group_name not in groups:
            raise KeyError(f"Unknown group: {group_name}")
        return list(groups[group_name])

    def build_group(self, group_name: str) -> Network:
        """Merge every network of a group into one.

        Returns:
            The combined network

        Raises:
            KeyError: If the group or one of its networks is unknown
            ValueError: If the group is empty
            CycleDetectedError: If the networks cannot be merged without a cycle
        """
        members = self.get_group_members(group_name)
        if not members:
            raise ValueError(f"Group '{group_name}' has no networks")

        with timed_section_sync("build_group", group_name, members=len(members)):
            combined = self.get_network(members[0])
            for name in members[1:]:
                combined.add(self.get_network(name))
        return combined
