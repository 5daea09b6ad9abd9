"""Exceptions raised by the topology engine.

Two fault families:
- ParseError: bad address text or bad bracket notation. Recoverable, the
  caller gets the message verbatim.
- CycleDetectedError: a structural invariant would be broken (duplicate
  node, asymmetric adjacency, a second path to a node, an invalid merge).
"""
from enum import Enum
from typing import Optional

MESSAGE_PREFIX = "Error, "


class ParseFault(str, Enum):
    """Reason a piece of text could not be parsed."""
    EMPTY_INPUT = "the given input is empty"
    BLOCK_COUNT = "the address is not four 8-bit blocks separated by a period"
    NON_NUMERIC = "the address blocks must only contain digits"
    LEADING_ZEROS = "an address block contains leading zeros or a sign"
    OUT_OF_RANGE = "each address block must be a decimal value from 0 to 255"
    SPACING = "the bracket notation must separate tokens with exactly one space"
    NOT_ENOUGH_ELEMENTS = "the bracket notation needs more elements"
    TOO_MANY_ELEMENTS = "the bracket notation has too many elements"
    UNBALANCED_BRACKETS = "the bracket notation doesn't have equal number of '(' and ')'"
    UNEXPECTED_TOKEN = "unexpected token"
    DUPLICATE_KEY = "the bracket notation has duplicate addresses"


class CycleFault(str, Enum):
    """Structural violation that would turn a tree into something else."""
    DUPLICATE_NODE = "cycle has emerged due to duplicate addresses"
    REVISIT = "cycle emerged because two parent nodes reach the same child node"
    ASYMMETRIC_EDGE = "the graph has a one-sided connection between two nodes"
    INVALID_MERGE = "merging the topologies does not result in a valid tree"


class TopologyError(Exception):
    """Base exception for topology operations."""


class ParseError(TopologyError):
    """Raised when an address or a bracket notation cannot be parsed."""

    def __init__(self, fault: ParseFault, token: Optional[str] = None):
        self.fault = fault
        self.token = token
        message = f"{MESSAGE_PREFIX}{fault.value}"
        if token is not None:
            message += f" (token: {token!r})"
        super().__init__(message)


class CycleDetectedError(TopologyError, ValueError):
    """Raised when an operation would break the acyclic/connected invariant."""

    def __init__(self, fault: CycleFault, node: Optional[object] = None):
        self.fault = fault
        self.node = node
        message = f"{MESSAGE_PREFIX}{fault.value}"
        if node is not None:
            message += f" (node: {node})"
        super().__init__(message)
