"""Tests for IPv4 address parsing and ordering."""
import pytest
from canopy_network.topology import IPAddress, ParseError, ParseFault


class TestIPAddressParse:
    """Tests for IPAddress.parse."""

    def test_parse_simple(self):
        """Valid point notation gives the 32-bit value."""
        address = IPAddress.parse("192.168.0.1")
        assert address.value == (192 << 24) | (168 << 16) | 1
        assert str(address) == "192.168.0.1"
        assert address.octets() == (192, 168, 0, 1)

    def test_parse_bounds(self):
        """0.0.0.0 and 255.255.255.255 are both valid."""
        assert IPAddress.parse("0.0.0.0").value == 0
        assert IPAddress.parse("255.255.255.255").value == 2 ** 32 - 1

    @pytest.mark.parametrize("text", ["", None])
    def test_parse_empty(self, text):
        """Empty input is rejected."""
        with pytest.raises(ParseError) as exc:
            IPAddress.parse(text)
        assert exc.value.fault == ParseFault.EMPTY_INPUT

    @pytest.mark.parametrize("text", ["1.2.3", "1.2.3.4.5", "1.2.3.4.", "1.2.3."])
    def test_parse_block_count(self, text):
        """Anything but four blocks is rejected."""
        with pytest.raises(ParseError) as exc:
            IPAddress.parse(text)
        assert exc.value.fault == ParseFault.BLOCK_COUNT

    @pytest.mark.parametrize("text", ["a.b.c.d", "1..2.3", "1.2.3.x", "1.2.3.4)", " 1.2.3.4"])
    def test_parse_non_numeric(self, text):
        """Blocks must be digits only."""
        with pytest.raises(ParseError) as exc:
            IPAddress.parse(text)
        assert exc.value.fault == ParseFault.NON_NUMERIC

    @pytest.mark.parametrize("text", ["01.2.3.4", "1.2.3.00", "+1.2.3.4", "-0.2.3.4"])
    def test_parse_leading_zeros(self, text):
        """Leading zeros and signs are not canonical."""
        with pytest.raises(ParseError) as exc:
            IPAddress.parse(text)
        assert exc.value.fault == ParseFault.LEADING_ZEROS

    @pytest.mark.parametrize("text", ["256.0.0.1", "1.2.3.999", "-1.2.3.4"])
    def test_parse_out_of_range(self, text):
        """Blocks must be within 0..255."""
        with pytest.raises(ParseError) as exc:
            IPAddress.parse(text)
        assert exc.value.fault == ParseFault.OUT_OF_RANGE

    def test_error_message_prefix(self):
        """Messages follow the 'Error, ...' convention."""
        with pytest.raises(ParseError) as exc:
            IPAddress.parse("1.2.3")
        assert str(exc.value).startswith("Error, ")


class TestIPAddressOrdering:
    """Tests for ordering and equality."""

    def test_order_is_most_significant_octet_first(self):
        """128.0.0.0 sorts after 127.255.255.255."""
        low = IPAddress.parse("127.255.255.255")
        high = IPAddress.parse("128.0.0.0")
        assert low < high
        assert sorted([high, low]) == [low, high]

    def test_equality_and_hash(self):
        """Equal addresses compare and hash equal."""
        first = IPAddress.parse("10.0.0.1")
        second = IPAddress.parse("10.0.0.1")
        assert first == second
        assert len({first, second}) == 1

    def test_from_octets(self):
        """from_octets builds the same address as parsing."""
        assert IPAddress.from_octets(10, 0, 0, 1) == IPAddress.parse("10.0.0.1")
        assert str(IPAddress.from_octets(10, 0, 0, 1)) == "10.0.0.1"

    def test_from_octets_out_of_range(self):
        with pytest.raises(ParseError):
            IPAddress.from_octets(10, 0, 0, 300)

    def test_value_out_of_range(self):
        """Values outside 32 bits are rejected."""
        with pytest.raises(ValueError):
            IPAddress(2 ** 32)

    def test_immutable(self):
        """Addresses cannot be modified."""
        address = IPAddress.parse("10.0.0.1")
        with pytest.raises(AttributeError):
            address.value = 5
