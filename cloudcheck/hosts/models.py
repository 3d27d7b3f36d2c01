"""Data models for host range classification.

This module provides the immutable descriptor telling the extractor where a
host's CIDR list lives, and the parsed per-host network produced from it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from ipaddress import IPv4Address, IPv4Network
from pathlib import Path
from typing import Optional, Tuple, Union

from ..errors import FormatError
from ..utils.ipv4 import network_contains


@dataclass(slots=True, frozen=True)
class HostDescriptor:
    """Declarative description of one host's published range document.

    Attributes:
        host_name: Display name of the range owner (e.g., "Google Cloud")
        source_path: Location of the JSON document on disk
        array_pointer: JSON Pointer selecting the array of range entries
        field_name: Key inside each entry holding an IPv4 CIDR string
        source_uri: Upstream URL the document is published at (informational)

    Example:
        >>> descriptor = HostDescriptor(
        ...     host_name="Google Cloud",
        ...     source_path="data/google-cloud-ranges.json",
        ...     array_pointer="/prefixes",
        ...     field_name="ipv4Prefix",
        ... )
        >>> descriptor.source_path
        PosixPath('data/google-cloud-ranges.json')

    Raises:
        FormatError: If any of the four required fields is empty
    """

    host_name: str
    source_path: Path
    array_pointer: str
    field_name: str
    source_uri: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate required fields and normalize ``source_path``."""
        for name in ("host_name", "array_pointer", "field_name"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise FormatError(f"Host descriptor field '{name}' must be a non-empty string, got {value!r}")

        source_path: Union[str, Path] = self.source_path
        # Path("") normalizes to Path(".")
        if not str(source_path).strip() or (isinstance(source_path, Path) and source_path == Path("")):
            raise FormatError(f"Host descriptor field 'source_path' must be non-empty, got {source_path!r}")
        if not isinstance(source_path, Path):
            # Use object.__setattr__ because dataclass is frozen
            object.__setattr__(self, "source_path", Path(source_path))

    def resolve(self, base_dir: Optional[Path]) -> "HostDescriptor":
        """Return a copy whose relative ``source_path`` is anchored at ``base_dir``."""
        if base_dir is None or self.source_path.is_absolute():
            return self
        return replace(self, source_path=Path(base_dir) / self.source_path)


@dataclass(slots=True, frozen=True)
class HostNetwork:
    """Parsed CIDR blocks owned by a single host, in document order."""

    name: str
    subnets: Tuple[IPv4Network, ...]
    source_path: Optional[Path] = None

    def find_subnet(self, address: IPv4Address) -> Optional[IPv4Network]:
        """Return the first block containing ``address``, if any."""
        for subnet in self.subnets:
            if network_contains(subnet, address):
                return subnet
        return None

    def contains(self, address: IPv4Address) -> bool:
        """Check whether any of this host's blocks contains ``address``."""
        return self.find_subnet(address) is not None

    def __len__(self) -> int:
        return len(self.subnets)


DEFAULT_DESCRIPTORS: Tuple[HostDescriptor, ...] = (
    HostDescriptor(
        host_name="Google Cloud",
        source_path=Path("data/google-cloud-ranges.json"),
        array_pointer="/prefixes",
        field_name="ipv4Prefix",
        source_uri="https://www.gstatic.com/ipranges/cloud.json",
    ),
    HostDescriptor(
        host_name="Amazon Web Services",
        source_path=Path("data/aws-ranges.json"),
        array_pointer="/prefixes",
        field_name="ip_prefix",
        source_uri="https://ip-ranges.amazonaws.com/ip-ranges.json",
    ),
)


__all__ = ["DEFAULT_DESCRIPTORS", "HostDescriptor", "HostNetwork"]
