"""Recursive-descent parser for the bracket notation of tree topologies.

Grammar::

    tree       := '(' address connection+
    connection := tree | address

Tokens are separated by exactly one space. A token may carry one leading
``(`` (opening a tree) or any number of trailing ``)`` (closing the current
tree and possibly enclosing ones). Every address may occur only once.

Example: ``(10.0.0.1 (10.0.0.2 10.0.0.4) 10.0.0.3)`` connects 10.0.0.1 to
10.0.0.2 and 10.0.0.3, and 10.0.0.2 to 10.0.0.4.
"""
import logging
from collections import deque
from typing import Optional

from .address import IPAddress
from .errors import ParseError, ParseFault
from .tree import Tree

logger = logging.getLogger(__name__)

OPEN_BRACKET = "("
CLOSE_BRACKET = ")"
SEPARATOR = " "


class BracketParser:
    """Parse bracket notation into a Tree."""

    def __init__(self):
        self._reset()

    def _reset(self) -> None:
        self._tokens: deque[str] = deque()
        self._lookahead = ""
        self._opened = 0
        self._closed = 0
        self._seen: set[IPAddress] = set()
        self._stars: list[Tree] = []

    def parse(self, text: Optional[str]) -> Tree:
        """
        Parse a bracket notation string.

        Args:
            text: Bracket notation, e.g. ``(10.0.0.1 10.0.0.2 10.0.0.3)``

        Returns:
            The tree described by the notation

        Raises:
            ParseError: If the notation is malformed or repeats an address
        """
        if not text:
            raise ParseError(ParseFault.EMPTY_INPUT)

        self._reset()
        self._tokens = deque(self._tokenize(text))

        self._next()
        self._parse_tree()

        # The grammar closes the outermost tree exactly on the last token
        if self._tokens:
            raise ParseError(ParseFault.TOO_MANY_ELEMENTS, self._tokens[0])
        if self._opened != self._closed:
            raise ParseError(ParseFault.UNBALANCED_BRACKETS)

        tree = self._combine()
        logger.debug(f"Parsed bracket notation into a tree of {tree.node_count()} nodes")
        return tree

    @staticmethod
    def _tokenize(text: str) -> list[str]:
        tokens = text.split(SEPARATOR)
        for token in tokens:
            if not token or any(char.isspace() for char in token):
                raise ParseError(ParseFault.SPACING)
        return tokens

    def _next(self) -> None:
        if not self._tokens:
            raise ParseError(ParseFault.NOT_ENOUGH_ELEMENTS)
        self._lookahead = self._tokens.popleft()

    def _parse_tree(self) -> IPAddress:
        """tree := '(' address connection+"""
        if not self._lookahead.startswith(OPEN_BRACKET):
            raise ParseError(ParseFault.UNEXPECTED_TOKEN, self._lookahead)

        self._opened += 1
        self._lookahead = self._lookahead[len(OPEN_BRACKET):]
        if self._lookahead.endswith(CLOSE_BRACKET):
            # "(a)": a tree needs at least one connection
            raise ParseError(ParseFault.NOT_ENOUGH_ELEMENTS, self._lookahead)

        root = self._parse_address()
        children = self._parse_connections()
        self._stars.insert(0, Tree.from_star(root, children))
        return root

    def _parse_address(self) -> IPAddress:
        address = IPAddress.parse(self._lookahead)
        if address in self._seen:
            raise ParseError(ParseFault.DUPLICATE_KEY, self._lookahead)
        self._seen.add(address)
        return address

    def _parse_connections(self) -> list[IPAddress]:
        """connection+ up to the bracket that closes the current tree."""
        connections = []
        open_on_entry = self._open_count()
        while True:
            self._next()
            if self._lookahead.startswith(OPEN_BRACKET):
                connections.append(self._parse_tree())
            else:
                closes_tree = self._consume_closing_brackets()
                connections.append(self._parse_address())
                if closes_tree:
                    return connections
            if not self._can_continue(open_on_entry):
                return connections

    def _consume_closing_brackets(self) -> bool:
        stripped = self._lookahead.rstrip(CLOSE_BRACKET)
        count = len(self._lookahead) - len(stripped)
        if not count:
            return False

        self._closed += count
        if self._closed > self._opened or (self._balanced() and self._tokens):
            raise ParseError(ParseFault.UNBALANCED_BRACKETS, self._lookahead)
        self._lookahead = stripped
        return True

    def _can_continue(self, open_on_entry: int) -> bool:
        if self._balanced() and self._tokens:
            raise ParseError(ParseFault.TOO_MANY_ELEMENTS, self._tokens[0])
        if self._closed > self._opened:
            raise ParseError(ParseFault.UNBALANCED_BRACKETS)
        # A nested tree that closed more than itself also ended this one
        return not self._balanced() and open_on_entry <= self._open_count()

    def _open_count(self) -> int:
        return self._opened - self._closed

    def _balanced(self) -> bool:
        return self._opened == self._closed

    def _combine(self) -> Tree:
        """Merge the parsed stars, outermost first, into one tree."""
        result = self._stars[0]
        for star in self._stars[1:]:
            before = result.copy()
            if not result.absorb(star):
                raise ParseError(ParseFault.UNEXPECTED_TOKEN, str(star.nodes()[0]))
            if result == before:
                raise ParseError(ParseFault.DUPLICATE_KEY, str(star.nodes()[0]))
        return result


def parse_bracket_notation(text: Optional[str]) -> Tree:
    """Convenience wrapper around BracketParser.parse."""
    return BracketParser().parse(text)
