"""Extraction of failed sshd login attempts from syslog-style auth log lines.

Only "Invalid user" events are recognized, e.g.::

    Mar  3 10:15:42 bastion sshd[1234]: Invalid user admin from 203.0.113.7 port 52113

Fields are whitespace-delimited; the service, message, user, address and port
live at fixed positions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from ipaddress import IPv4Address
from typing import Iterable, Iterator, Optional, Tuple

from .errors import AddressParseError, CloudCheckError, LogFormatError
from .utils.ipv4 import parse_ipv4_address

logger = logging.getLogger(__name__)

SERVICE_IDX = 4
MESSAGE_IDX = 5
USER_IDX = 7
ADDRESS_IDX = 9
PORT_IDX = 11

_MAX_PORT = 65535


def get_field(line: str, index: int) -> Optional[str]:
    """Return the ``index``-th whitespace-delimited field of ``line``, or None."""
    fields = line.split()
    if index < len(fields):
        return fields[index]
    return None


def is_sshd_log(line: str) -> bool:
    """Check whether ``line`` was written by sshd."""
    service = get_field(line, SERVICE_IDX)
    return service is not None and service.startswith("sshd[")


def is_sshd_failure(line: str) -> bool:
    """Check whether ``line`` is an sshd invalid-user login failure."""
    return is_sshd_log(line) and get_field(line, MESSAGE_IDX) == "Invalid"


def _require_field(line: str, index: int, name: str) -> str:
    value = get_field(line, index)
    if value is None:
        raise LogFormatError(f"sshd log line has no {name} field: {line!r}")
    return value


def _parse_port(value: str, line: str) -> int:
    if not value.isascii() or not value.isdigit() or int(value) > _MAX_PORT:
        raise LogFormatError(f"Invalid port {value!r} in sshd log line: {line!r}")
    return int(value)


@dataclass(slots=True, frozen=True)
class SshdEvent:
    """A failed sshd login attempt.

    Attributes:
        log: The original log line
        user: Username the client tried
        address: Client IPv4 address
        port: Client source port
    """

    log: str
    user: str
    address: IPv4Address
    port: int

    @classmethod
    def from_line(cls, line: str) -> "SshdEvent":
        """Parse an auth log line into an event.

        Raises:
            LogFormatError: If the line is not an sshd invalid-user failure,
                lacks a field, or carries an invalid port
            AddressParseError: If the address field is not an IPv4 address
        """
        if not is_sshd_failure(line):
            raise LogFormatError(f"Not an sshd login failure: {line!r}")

        user = _require_field(line, USER_IDX, "user")
        address = parse_ipv4_address(_require_field(line, ADDRESS_IDX, "address"))
        port = _parse_port(_require_field(line, PORT_IDX, "port"), line)
        return cls(log=line.rstrip("\r\n"), user=user, address=address, port=port)


def parse_sshd_line(line: str) -> SshdEvent:
    """Parse ``line`` into an ``SshdEvent``; see ``SshdEvent.from_line``."""
    return SshdEvent.from_line(line)


def iter_sshd_events(lines: Iterable[str]) -> Iterator[Tuple[int, SshdEvent | CloudCheckError]]:
    """Yield ``(line_number, event_or_error)`` for every sshd failure line.

    Lines that are not sshd login failures are skipped. Malformed failure
    lines yield their error instead of raising, so one bad line does not stop
    the stream.
    """
    for line_number, line in enumerate(lines, start=1):
        if not is_sshd_failure(line):
            logger.debug(f"Line {line_number}: not an sshd login failure, skipped")
            continue
        try:
            yield line_number, SshdEvent.from_line(line)
        except (LogFormatError, AddressParseError) as exc:
            logger.debug(f"Line {line_number}: {exc}")
            yield line_number, exc


__all__ = [
    "SshdEvent",
    "get_field",
    "is_sshd_failure",
    "is_sshd_log",
    "iter_sshd_events",
    "parse_sshd_line",
]
