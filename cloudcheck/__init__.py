"""Cloud host range checks for IPv4 addresses seen in SSH authentication logs."""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["get_version"]


def get_version() -> str:
    """Return the installed package version or a development marker."""
    try:
        return version("cloudcheck")
    except PackageNotFoundError:
        return "0.0.0-dev"
