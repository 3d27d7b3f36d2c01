"""Host range classification.

This package answers "which known host owns this IPv4 address" by testing
membership against CIDR ranges taken from provider-published JSON documents:
- Descriptors declare where each host's ranges live (path, pointer, field)
- Extraction turns one descriptor into an ordered list of CIDR blocks
- The database keeps hosts in priority order and returns the first match

Example:
    >>> from pathlib import Path
    >>> from cloudcheck.hosts import HostDatabase
    >>>
    >>> # Reads data/google-cloud-ranges.json and data/aws-ranges.json under base_dir
    >>> db = HostDatabase.with_default_hosts(base_dir=Path("/var/lib/cloudcheck"))  # doctest: +SKIP
    >>> host_name = db.lookup("203.0.113.7")  # doctest: +SKIP
"""

from .config_rows import descriptor_from_fields, descriptor_from_row, load_descriptors_csv, parse_rows
from .database import HostDatabase
from .extraction import extract_subnets, resolve_pointer
from .models import DEFAULT_DESCRIPTORS, HostDescriptor, HostNetwork

__all__ = [
    "DEFAULT_DESCRIPTORS",
    "HostDatabase",
    "HostDescriptor",
    "HostNetwork",
    "descriptor_from_fields",
    "descriptor_from_row",
    "extract_subnets",
    "load_descriptors_csv",
    "parse_rows",
    "resolve_pointer",
]
