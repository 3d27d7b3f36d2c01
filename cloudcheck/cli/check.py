"""Command line interface for checking IPv4 addresses against known host ranges."""

from __future__ import annotations

import argparse
import io
import logging
import sys
from ipaddress import IPv4Address
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, TextIO

from tqdm import tqdm

from ..errors import AddressParseError, CloudCheckError
from ..hosts import HostDatabase
from ..settings import CloudCheckSettings, load_settings
from ..sshd import iter_sshd_events
from ..utils.ipv4 import parse_ipv4_address

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERRORS = 1
EXIT_DATABASE_ERROR = 2
EXIT_INTERRUPTED = 130


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


def _resolve_settings(args: argparse.Namespace) -> CloudCheckSettings:
    return load_settings(
        config={
            "host_rows": args.host,
            "hosts_csv": args.csv,
            "data_dir": args.data_dir,
            "progress": args.progress or None,
            "verbose": args.verbose or None,
        },
        config_path=args.config,
    )


def build_database(settings: CloudCheckSettings, prefer_csv: bool = False) -> HostDatabase:
    """Build the host database from the configured source.

    Inline rows win over a hosts CSV, which wins over the built-in defaults.
    ``prefer_csv`` lets an explicit ``--csv`` override rows from a config file.
    """
    if settings.hosts_csv is not None and (prefer_csv or not settings.host_rows):
        logger.info(f"Loading host descriptors from {settings.hosts_csv}")
        return HostDatabase.from_hosts_csv(settings.hosts_csv, base_dir=settings.data_dir)
    if settings.host_rows:
        logger.info(f"Loading {len(settings.host_rows)} host descriptors from configuration rows")
        return HostDatabase.from_config_rows(settings.host_rows, base_dir=settings.data_dir)
    logger.info("Loading built-in host descriptors")
    return HostDatabase.with_default_hosts(base_dir=settings.data_dir)


def format_match(address: IPv4Address, db: HostDatabase, verbose: bool = False) -> Optional[str]:
    """Return the output line for ``address``, or None if no host owns it."""
    match = db.lookup_network(address)
    if match is None:
        return None
    host, subnet = match
    if verbose:
        return f"{address}: {host.name} ({subnet})"
    return f"{address}: {host.name}"


def check_address(value: str, db: HostDatabase, verbose: bool = False, out: TextIO | None = None) -> bool:
    """Look up one address string and print the owning host, if any.

    Returns:
        True if a host owns the address

    Raises:
        AddressParseError: If ``value`` is not an IPv4 address
    """
    line = format_match(parse_ipv4_address(value), db, verbose=verbose)
    if line is None:
        return False
    print(line, file=out or sys.stdout)
    return True


def check_address_lines(
    lines: Iterable[str],
    db: HostDatabase,
    source: str,
    progress: bool = False,
    verbose: bool = False,
) -> int:
    """Check one address per line, reporting bad lines and continuing.

    Returns:
        Number of lines that could not be parsed
    """
    failures = 0
    for line_number, line in enumerate(tqdm(lines, desc=f"Checking {source}", disable=not progress), start=1):
        if not line.strip():
            continue
        try:
            check_address(line, db, verbose=verbose)
        except AddressParseError as exc:
            logger.warning(f"{source}:{line_number}: {exc}")
            failures += 1
    return failures


def check_sshd_lines(
    lines: Iterable[str],
    db: HostDatabase,
    source: str,
    progress: bool = False,
    verbose: bool = False,
) -> int:
    """Check the client address of every failed sshd login in ``lines``.

    Returns:
        Number of sshd failure lines that could not be parsed
    """
    failures = 0
    iterator = tqdm(lines, desc=f"Scanning {source}", disable=not progress)
    for line_number, result in iter_sshd_events(iterator):
        if isinstance(result, CloudCheckError):
            logger.warning(f"{source}:{line_number}: {result}")
            failures += 1
            continue
        output = format_match(result.address, db, verbose=verbose)
        if output is not None:
            print(f"{output} [user={result.user} port={result.port}]" if verbose else output)
    return failures


def _run_over_inputs(
    args: argparse.Namespace,
    db: HostDatabase,
    settings: CloudCheckSettings,
    checker: Callable[..., int],
) -> int:
    failures = 0
    paths: Sequence[Path] = args.files or []
    if not paths:
        stdin = sys.stdin
        if isinstance(stdin, io.TextIOWrapper):
            # Undecodable bytes become U+FFFD and fail only their own line
            stdin.reconfigure(encoding="utf-8", errors="replace")
        return checker(stdin, db, "<stdin>", progress=settings.progress, verbose=settings.verbose)

    for path in paths:
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as handle:
                failures += checker(handle, db, str(path), progress=settings.progress, verbose=settings.verbose)
        except OSError as exc:
            logger.error(f"Unable to read {path}: {exc}")
            failures += 1
    return failures


def run_addresses(args: argparse.Namespace, db: HostDatabase, settings: CloudCheckSettings) -> int:
    """Check addresses from arguments, files, or standard input."""
    failures = 0
    if args.addresses:
        for value in args.addresses:
            try:
                check_address(value, db, verbose=settings.verbose)
            except AddressParseError as exc:
                logger.warning(str(exc))
                failures += 1
    else:
        failures = _run_over_inputs(args, db, settings, check_address_lines)
    return EXIT_INPUT_ERRORS if failures else EXIT_OK


def run_sshd(args: argparse.Namespace, db: HostDatabase, settings: CloudCheckSettings) -> int:
    """Check the sources of failed sshd logins in auth logs or standard input."""
    failures = _run_over_inputs(args, db, settings, check_sshd_lines)
    return EXIT_INPUT_ERRORS if failures else EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-c",
        "--csv",
        type=Path,
        help='CSV with columns "HOSTNAME,PATH,POINTER,FIELD": host name, path to the JSON range document, '
        "JSON pointer to the array of entries, and the entry field holding the IPv4 CIDR block",
    )
    common.add_argument(
        "--host",
        action="append",
        metavar="ROW",
        help='Host descriptor row "HOSTNAME,PATH,POINTER,FIELD" (repeatable; overrides --csv)',
    )
    common.add_argument("--data-dir", type=Path, help="Directory relative range document paths are resolved against")
    common.add_argument("--config", type=Path, help="TOML configuration file (default: config/cloudcheck.toml)")
    common.add_argument("--progress", action="store_true", help="Show a progress bar while reading inputs")
    common.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    parser = argparse.ArgumentParser(
        prog="cloudcheck",
        description="Checks IPv4 addresses against known host ranges. "
        "If no addresses or files are provided, input is read from standard input.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    addresses = subparsers.add_parser("addresses", parents=[common], help="Check IPv4 addresses")
    group = addresses.add_mutually_exclusive_group()
    group.add_argument("-a", "--addresses", nargs="+", metavar="ADDRESS", help="IP addresses to check")
    group.add_argument(
        "-f", "--files", nargs="+", type=Path, metavar="FILE", help="Files to check, with one IP address per line"
    )
    addresses.set_defaults(handler=run_addresses)

    sshd = subparsers.add_parser("sshd", parents=[common], help="Check sources of failed sshd logins in auth logs")
    sshd.add_argument("files", nargs="*", type=Path, metavar="FILE", help="Auth log files (default: stdin)")
    sshd.set_defaults(handler=run_sshd)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    """CLI entry point for address checks."""
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    settings = _resolve_settings(args)
    _configure_logging(settings.verbose)

    try:
        try:
            db = build_database(settings, prefer_csv=args.csv is not None and not args.host)
        except CloudCheckError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return EXIT_DATABASE_ERROR

        return int(args.handler(args, db, settings))
    except KeyboardInterrupt:
        print("Interrupted by user.", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
