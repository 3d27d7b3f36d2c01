"""Exception types raised while building and querying host range databases.

Construction errors are fatal: they propagate to the caller of the failing
operation and no database is returned. Address and log errors are raised per
input so that batch callers can report them and move on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .hosts.models import HostDescriptor


class CloudCheckError(Exception):
    """Base class for all cloudcheck errors.

    Attributes:
        descriptor: Descriptor being processed when the error occurred, if any
    """

    def __init__(self, message: str, *, descriptor: Optional["HostDescriptor"] = None) -> None:
        """Initialize the error with a message and optional descriptor context."""
        super().__init__(message)
        self.descriptor = descriptor


class SourceIOError(CloudCheckError):
    """A range document or configuration file could not be read."""


class SourceParseError(CloudCheckError):
    """A range document is not well-formed JSON."""


class FormatError(CloudCheckError, ValueError):
    """Well-formed input that does not have the expected shape.

    Raised when a pointer does not resolve to an array, when a CIDR string is
    malformed, and when a configuration row has the wrong number of fields.
    For row errors ``expected``, ``found`` and ``row`` are populated.
    """

    def __init__(
        self,
        message: str,
        *,
        descriptor: Optional["HostDescriptor"] = None,
        expected: Optional[int] = None,
        found: Optional[int] = None,
        row: Optional[str] = None,
    ) -> None:
        """Initialize the error with optional row field-count details."""
        super().__init__(message, descriptor=descriptor)
        self.expected = expected
        self.found = found
        self.row = row


class AddressParseError(CloudCheckError, ValueError):
    """A string supplied as an IPv4 address is not one."""

    def __init__(self, value: str) -> None:
        """Record the rejected value."""
        super().__init__(f"Invalid IPv4 address: {value!r}")
        self.value = value


class LogFormatError(CloudCheckError, ValueError):
    """A log line is not an sshd invalid-user event or one of its fields is unusable."""


__all__ = [
    "AddressParseError",
    "CloudCheckError",
    "FormatError",
    "LogFormatError",
    "SourceIOError",
    "SourceParseError",
]
