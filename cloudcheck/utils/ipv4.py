"""IPv4 address and CIDR block parsing."""

from __future__ import annotations

import ipaddress
import re
from ipaddress import IPv4Address, IPv4Network
from typing import Union

from ..errors import AddressParseError, FormatError

# ADDRESS/PREFIX with a plain decimal prefix length
_CIDR_PATTERN = re.compile(r"([^/]+)/(\d{1,2})", re.ASCII)
_MAX_PREFIX_LEN = 32

AddressLike = Union[IPv4Address, str]


def parse_ipv4_address(value: str) -> IPv4Address:
    """Parse a dotted-quad IPv4 address.

    Surrounding whitespace is ignored so that lines read from files can be
    passed in directly.

    Args:
        value: Address string such as ``"8.8.8.8"``

    Returns:
        The parsed address

    Raises:
        AddressParseError: If the value is not a valid IPv4 address
    """
    candidate = value.strip()
    try:
        return IPv4Address(candidate)
    except ipaddress.AddressValueError as exc:
        raise AddressParseError(value) from exc


def coerce_ipv4_address(address: AddressLike) -> IPv4Address:
    """Return ``address`` as an ``IPv4Address``, parsing strings."""
    if isinstance(address, IPv4Address):
        return address
    if isinstance(address, str):
        return parse_ipv4_address(address)
    raise AddressParseError(repr(address))


def parse_ipv4_network(value: str) -> IPv4Network:
    """Parse an IPv4 CIDR block in ``ADDRESS/PREFIX`` notation.

    The prefix length must be a decimal number between 0 and 32. Host bits set
    below the prefix are accepted and masked off, so ``"10.1.2.3/8"`` yields
    ``10.0.0.0/8``.

    Raises:
        FormatError: If the string is not a valid IPv4 CIDR block
    """
    match = _CIDR_PATTERN.fullmatch(value)
    if match is None:
        raise FormatError(f"Invalid IPv4 CIDR block: {value!r}")

    address_part, prefix_part = match.groups()
    prefix_len = int(prefix_part)
    if prefix_len > _MAX_PREFIX_LEN:
        raise FormatError(f"Invalid IPv4 CIDR block: {value!r} (prefix length {prefix_len} > {_MAX_PREFIX_LEN})")

    try:
        address = IPv4Address(address_part)
    except ipaddress.AddressValueError as exc:
        raise FormatError(f"Invalid IPv4 CIDR block: {value!r}") from exc

    return IPv4Network((address, prefix_len), strict=False)


def network_contains(network: IPv4Network, address: IPv4Address) -> bool:
    """Check whether ``address`` lies inside ``network``, boundaries included."""
    return (int(address) & int(network.netmask)) == int(network.network_address)


__all__ = [
    "AddressLike",
    "coerce_ipv4_address",
    "network_contains",
    "parse_ipv4_address",
    "parse_ipv4_network",
]
