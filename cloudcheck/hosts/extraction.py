"""Extraction of CIDR blocks from provider-published JSON range documents.

A single routine handles every provider: the descriptor names the document,
a JSON Pointer to the array of range entries, and the entry field holding the
CIDR string. Entries lacking that field (for example IPv6-only entries sharing
the array) are skipped; a present but malformed CIDR string fails the whole
document.
"""

from __future__ import annotations

import json
import logging
from ipaddress import IPv4Network
from typing import Any, List, Optional

from ..errors import FormatError, SourceIOError, SourceParseError
from ..utils.ipv4 import parse_ipv4_network
from .models import HostDescriptor

logger = logging.getLogger(__name__)

_MISSING = object()


def _unescape_token(token: str) -> str:
    # Order matters: "~01" must decode to "~1", not "/"
    return token.replace("~1", "/").replace("~0", "~")


def _parse_array_index(token: str) -> Optional[int]:
    if not token.isascii() or not token.isdigit():
        return None
    if len(token) > 1 and token.startswith("0"):
        return None
    return int(token)


def resolve_pointer(document: Any, pointer: str) -> Any:
    """Resolve a JSON Pointer (RFC 6901) against a parsed document.

    Args:
        document: Parsed JSON value (dicts, lists and scalars)
        pointer: Pointer such as ``"/prefixes"``; ``""`` selects the root

    Returns:
        The referenced node, or None if the pointer does not resolve

    Example:
        >>> resolve_pointer({"a": [{"b/c": 1}]}, "/a/0/b~1c")
        1
    """
    if pointer == "":
        return document
    if not pointer.startswith("/"):
        return None

    node = document
    for raw_token in pointer[1:].split("/"):
        token = _unescape_token(raw_token)
        if isinstance(node, dict):
            node = node.get(token, _MISSING)
            if node is _MISSING:
                return None
        elif isinstance(node, list):
            index = _parse_array_index(token)
            if index is None or index >= len(node):
                return None
            node = node[index]
        else:
            return None
    return node


def load_document(descriptor: HostDescriptor) -> Any:
    """Read and parse the JSON document referenced by ``descriptor``.

    Raises:
        SourceIOError: If the file cannot be read
        SourceParseError: If the content is not well-formed JSON
    """
    path = descriptor.source_path
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceIOError(
            f"{descriptor.host_name}: unable to read range document {path}: {exc}", descriptor=descriptor
        ) from exc

    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SourceParseError(
            f"{descriptor.host_name}: range document {path} is not valid JSON: {exc}", descriptor=descriptor
        ) from exc


def extract_subnets(descriptor: HostDescriptor) -> List[IPv4Network]:
    """Produce the ordered CIDR blocks described by ``descriptor``.

    Args:
        descriptor: Where to find the document, the array and the CIDR field

    Returns:
        CIDR blocks in document array order, duplicates preserved

    Raises:
        SourceIOError: If the document cannot be read
        SourceParseError: If the document is not valid JSON
        FormatError: If the pointer does not select an array, or an entry
            holds a malformed CIDR string
    """
    document = load_document(descriptor)

    entries = resolve_pointer(document, descriptor.array_pointer)
    if not isinstance(entries, list):
        raise FormatError(
            f"{descriptor.host_name}: invalid JSON format in {descriptor.source_path}: "
            f"pointer {descriptor.array_pointer!r} does not resolve to an array",
            descriptor=descriptor,
        )

    subnets: List[IPv4Network] = []
    skipped = 0
    for entry in entries:
        value = entry.get(descriptor.field_name) if isinstance(entry, dict) else None
        if not isinstance(value, str):
            skipped += 1
            continue

        try:
            subnets.append(parse_ipv4_network(value))
        except FormatError as exc:
            raise FormatError(
                f"{descriptor.host_name}: invalid CIDR block {value!r} in {descriptor.source_path} "
                f"(field {descriptor.field_name!r})",
                descriptor=descriptor,
            ) from exc

    logger.debug(
        f"{descriptor.host_name}: extracted {len(subnets)} subnets from {descriptor.source_path} "
        f"({skipped} entries without {descriptor.field_name!r})"
    )
    return subnets


__all__ = ["extract_subnets", "load_document", "resolve_pointer"]
