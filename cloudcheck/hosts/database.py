"""Host range database: ordered host networks with first-match address lookup."""

from __future__ import annotations

import logging
from ipaddress import IPv4Address, IPv4Network
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from ..errors import CloudCheckError
from ..utils.ipv4 import AddressLike, coerce_ipv4_address
from .config_rows import load_descriptors_csv, parse_rows
from .extraction import extract_subnets
from .models import DEFAULT_DESCRIPTORS, HostDescriptor, HostNetwork

logger = logging.getLogger(__name__)


class HostDatabase:
    """Read-only collection of host networks answering "who owns this address".

    Hosts are searched in registration order and the first host with a block
    containing the address wins. Overlapping ranges across hosts are not
    rejected. Lookups are a linear scan over every block, which is fine for
    published provider lists of a few thousand entries.

    The database never changes after construction, so a single instance can be
    shared between readers without locking.

    Example:
        >>> db = HostDatabase(
        ...     [HostNetwork(name="Example", subnets=(IPv4Network("203.0.113.0/24"),))]
        ... )
        >>> db.lookup("203.0.113.7")
        'Example'
        >>> db.lookup("198.51.100.1") is None
        True
    """

    def __init__(self, hosts: Iterable[HostNetwork] = ()) -> None:
        """Wrap already parsed host networks, preserving their order."""
        self._hosts: Tuple[HostNetwork, ...] = tuple(hosts)

    @classmethod
    def from_descriptors(
        cls,
        descriptors: Iterable[HostDescriptor],
        base_dir: Optional[Path] = None,
    ) -> "HostDatabase":
        """Parse every descriptor's document and build the database.

        Construction is all-or-nothing: the first failing descriptor aborts
        the build and its error is propagated unchanged.

        Args:
            descriptors: Descriptors in registration (priority) order
            base_dir: Directory that relative source paths are resolved against

        Raises:
            SourceIOError: If a document cannot be read
            SourceParseError: If a document is not valid JSON
            FormatError: If a document does not have the described shape
        """
        hosts: List[HostNetwork] = []
        for descriptor in descriptors:
            resolved = descriptor.resolve(base_dir)
            try:
                subnets = extract_subnets(resolved)
            except CloudCheckError as exc:
                logger.error(f"Failed to load ranges for {resolved.host_name} from {resolved.source_path}: {exc}")
                raise
            hosts.append(HostNetwork(name=resolved.host_name, subnets=tuple(subnets), source_path=resolved.source_path))

        database = cls(hosts)
        logger.info(
            f"Host database loaded: {database.subnet_count} subnets across {len(database)} hosts "
            f"({', '.join(f'{name}={count}' for name, count in database.describe().items())})"
        )
        return database

    @classmethod
    def with_default_hosts(cls, base_dir: Optional[Path] = None) -> "HostDatabase":
        """Build the database from the built-in Google Cloud and AWS descriptors."""
        return cls.from_descriptors(DEFAULT_DESCRIPTORS, base_dir=base_dir)

    @classmethod
    def from_config_rows(cls, rows: Iterable[str], base_dir: Optional[Path] = None) -> "HostDatabase":
        """Build the database from ``HOSTNAME,PATH,POINTER,FIELD`` rows.

        Raises:
            FormatError: If a row does not have exactly four fields
        """
        return cls.from_descriptors(parse_rows(rows), base_dir=base_dir)

    @classmethod
    def from_hosts_csv(cls, path: Union[str, Path], base_dir: Optional[Path] = None) -> "HostDatabase":
        """Build the database from a hosts CSV file."""
        return cls.from_descriptors(load_descriptors_csv(path), base_dir=base_dir)

    @property
    def hosts(self) -> Tuple[HostNetwork, ...]:
        """Host networks in registration order."""
        return self._hosts

    @property
    def subnet_count(self) -> int:
        """Total number of CIDR blocks across all hosts."""
        return sum(len(host) for host in self._hosts)

    def describe(self) -> Dict[str, int]:
        """Return subnet counts keyed by host name."""
        return {host.name: len(host) for host in self._hosts}

    def lookup_network(self, address: AddressLike) -> Optional[Tuple[HostNetwork, IPv4Network]]:
        """Find the owning host and the matching block for ``address``.

        Raises:
            AddressParseError: If ``address`` is a string that is not an IPv4 address
        """
        ip: IPv4Address = coerce_ipv4_address(address)
        for host in self._hosts:
            subnet = host.find_subnet(ip)
            if subnet is not None:
                return host, subnet
        return None

    def lookup(self, address: AddressLike) -> Optional[str]:
        """Return the name of the first host owning ``address``, or None.

        Raises:
            AddressParseError: If ``address`` is a string that is not an IPv4 address
        """
        match = self.lookup_network(address)
        if match is None:
            return None
        return match[0].name

    def __len__(self) -> int:
        return len(self._hosts)

    def __iter__(self) -> Iterator[HostNetwork]:
        return iter(self._hosts)

    def __repr__(self) -> str:
        return f"HostDatabase(hosts={[host.name for host in self._hosts]!r}, subnets={self.subnet_count})"


__all__ = ["HostDatabase"]
