"""Parsing of ``HOSTNAME,PATH,POINTER,FIELD`` configuration rows into descriptors."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from ..errors import FormatError, SourceIOError
from .models import HostDescriptor

logger = logging.getLogger(__name__)

ROW_FIELDS = ("HOSTNAME", "PATH", "POINTER", "FIELD")
EXPECTED_FIELD_COUNT = len(ROW_FIELDS)


def _is_ignorable(row: str) -> bool:
    stripped = row.strip()
    return not stripped or stripped.startswith("#")


def _is_header(fields: Sequence[str]) -> bool:
    return tuple(field.strip().upper() for field in fields) == ROW_FIELDS


def descriptor_from_fields(fields: Sequence[str], raw: Optional[str] = None) -> HostDescriptor:
    """Build a descriptor from an already split row.

    Args:
        fields: Row values in ``HOSTNAME,PATH,POINTER,FIELD`` order
        raw: Original row text, used in error messages

    Raises:
        FormatError: If the row does not have exactly four fields, or a
            field is empty
    """
    raw_text = raw if raw is not None else ",".join(fields)
    if len(fields) != EXPECTED_FIELD_COUNT:
        raise FormatError(
            f"Expected {EXPECTED_FIELD_COUNT} fields ({','.join(ROW_FIELDS)}), found {len(fields)}: {raw_text!r}",
            expected=EXPECTED_FIELD_COUNT,
            found=len(fields),
            row=raw_text,
        )

    host_name, source_path, array_pointer, field_name = (field.strip() for field in fields)
    if not source_path:
        raise FormatError(f"Empty PATH field in host row: {raw_text!r}", row=raw_text)
    return HostDescriptor(
        host_name=host_name,
        source_path=Path(source_path),
        array_pointer=array_pointer,
        field_name=field_name,
    )


def descriptor_from_row(row: str) -> HostDescriptor:
    """Parse a single comma-separated configuration row.

    Example:
        >>> descriptor_from_row("Google Cloud,data/google-cloud-ranges.json,/prefixes,ipv4Prefix").field_name
        'ipv4Prefix'
    """
    return descriptor_from_fields(row.split(","), raw=row)


def parse_rows(rows: Iterable[str]) -> List[HostDescriptor]:
    """Parse raw configuration rows, ignoring blank and ``#`` comment rows."""
    return [descriptor_from_row(row) for row in rows if not _is_ignorable(row)]


def load_descriptors_csv(path: Union[str, Path]) -> List[HostDescriptor]:
    """Read descriptors from a CSV file with ``HOSTNAME,PATH,POINTER,FIELD`` columns.

    Quoted values may contain commas. Blank rows and ``#`` comment rows are
    ignored, as is a header when it is the first remaining row.

    Raises:
        SourceIOError: If the file cannot be read
        FormatError: If a row does not have exactly four fields
    """
    csv_path = Path(path)
    try:
        with csv_path.open("r", encoding="utf-8", newline="") as handle:
            rows = list(csv.reader(handle))
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceIOError(f"Unable to read hosts CSV {csv_path}: {exc}") from exc

    descriptors: List[HostDescriptor] = []
    seen_first_row = False
    for fields in rows:
        if not fields or _is_ignorable(",".join(fields)):
            continue
        if not seen_first_row:
            seen_first_row = True
            if _is_header(fields):
                continue
        descriptors.append(descriptor_from_fields(fields))

    logger.debug(f"Loaded {len(descriptors)} host descriptors from {csv_path}")
    return descriptors


__all__ = [
    "EXPECTED_FIELD_COUNT",
    "ROW_FIELDS",
    "descriptor_from_fields",
    "descriptor_from_row",
    "load_descriptors_csv",
    "parse_rows",
]
