"""IPv4 addresses used as node identifiers.

An address is an immutable 32-bit value with its canonical dotted-quad text.
Ordering compares the octets most significant first, which for an unsigned
32-bit value is plain integer order.
"""
import re
from dataclasses import dataclass, field
from typing import Optional

from .errors import ParseError, ParseFault

OCTET_COUNT = 4
OCTET_BITS = 8
MAX_OCTET = 255

_BLOCK_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True, order=True)
class IPAddress:
    """An IPv4 address in decimal point notation."""
    value: int
    text: str = field(compare=False, default="")

    def __post_init__(self):
        if not 0 <= self.value < 1 << (OCTET_BITS * OCTET_COUNT):
            raise ValueError(f"Address value out of 32-bit range: {self.value}")
        if not self.text:
            object.__setattr__(self, "text", self._format(self.value))

    @classmethod
    def parse(cls, text: Optional[str]) -> "IPAddress":
        """Parse decimal point notation such as ``192.168.0.1``.

        Raises:
            ParseError: if the text is empty, does not have four blocks,
                has non-numeric blocks, leading zeros or out-of-range values.
        """
        if not text:
            raise ParseError(ParseFault.EMPTY_INPUT)

        blocks = text.split(".")
        if len(blocks) != OCTET_COUNT or text.endswith("."):
            raise ParseError(ParseFault.BLOCK_COUNT, text)

        value = 0
        for index, block in enumerate(blocks):
            octet = cls._parse_block(block, text)
            value += octet << (OCTET_BITS * (OCTET_COUNT - 1 - index))
        return cls(value, text)

    @classmethod
    def from_octets(cls, *octets: int) -> "IPAddress":
        """Build an address from four integer octets."""
        if len(octets) != OCTET_COUNT:
            raise ParseError(ParseFault.BLOCK_COUNT, ".".join(map(str, octets)))
        value = 0
        for octet in octets:
            if not 0 <= octet <= MAX_OCTET:
                raise ParseError(ParseFault.OUT_OF_RANGE, str(octet))
            value = (value << OCTET_BITS) | octet
        return cls(value)

    @staticmethod
    def _parse_block(block: str, text: str) -> int:
        if not _BLOCK_PATTERN.fullmatch(block):
            raise ParseError(ParseFault.NON_NUMERIC, text)
        octet = int(block)
        # "007", "+7" and "-0" all differ from their canonical form
        if str(octet) != block:
            raise ParseError(ParseFault.LEADING_ZEROS, text)
        if not 0 <= octet <= MAX_OCTET:
            raise ParseError(ParseFault.OUT_OF_RANGE, text)
        return octet

    @staticmethod
    def _format(value: int) -> str:
        return ".".join(str(octet) for octet in IPAddress._split(value))

    @staticmethod
    def _split(value: int) -> tuple[int, ...]:
        return tuple(
            (value >> (OCTET_BITS * shift)) & MAX_OCTET
            for shift in range(OCTET_COUNT - 1, -1, -1)
        )

    def octets(self) -> tuple[int, ...]:
        """Octets of the address, most significant first."""
        return self._split(self.value)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"IPAddress({self.text!r})"
