"""Runtime configuration for cloudcheck."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_FILES = (Path("config/cloudcheck.toml"), Path("cloudcheck.toml"))


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _coerce_path(value: Any) -> Path | None:
    if value is None:
        return None
    text = str(value).strip()
    return Path(text).expanduser() if text else None


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load the ``[cloudcheck]`` table from a TOML file.

    Without an explicit path, ``config/cloudcheck.toml`` and then
    ``cloudcheck.toml`` in the working directory are tried.

    Returns:
        The table contents, or an empty dict if no usable file was found
    """
    candidates = (path,) if path is not None else _DEFAULT_CONFIG_FILES
    config_file = next((candidate for candidate in candidates if candidate.exists()), None)
    if config_file is None:
        return {}

    try:
        with config_file.open("rb") as handle:
            data = tomllib.load(handle)
    except OSError as e:
        logger.debug(f"Could not read {config_file}: {e}")
        return {}
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Failed to parse {config_file}: {e}. Using defaults.")
        return {}

    table = data.get("cloudcheck", {})
    if not isinstance(table, dict):
        logger.warning(f"Ignoring non-table [cloudcheck] entry in {config_file}")
        return {}
    return table


@dataclass(slots=True)
class CloudCheckSettings:
    """Normalized configuration used by the command line entry point.

    Attributes:
        hosts_csv: CSV file of ``HOSTNAME,PATH,POINTER,FIELD`` rows
        host_rows: Inline configuration rows; take precedence over ``hosts_csv``
        data_dir: Directory relative range document paths are resolved against
        progress: Show a progress bar while reading inputs
        verbose: Enable detailed logging and output
    """

    hosts_csv: Path | None = None
    host_rows: List[str] = field(default_factory=list)
    data_dir: Path | None = None
    progress: bool = False
    verbose: bool = False

    @classmethod
    def from_sources(
        cls,
        config: Mapping[str, Any] | None = None,
        file_config: Mapping[str, Any] | None = None,
        env_prefix: str = "CLOUDCHECK_",
    ) -> "CloudCheckSettings":
        """Build settings from defaults, a config file, the environment and explicit values.

        Precedence order (highest to lowest):
        1. Explicit config mapping values
        2. Environment variables
        3. Config file values
        4. Default values
        """
        cfg: Dict[str, Any] = {
            "hosts_csv": None,
            "host_rows": [],
            "data_dir": None,
            "progress": False,
            "verbose": False,
        }

        if file_config:
            cfg["hosts_csv"] = _coerce_path(file_config.get("hosts_csv"))
            cfg["data_dir"] = _coerce_path(file_config.get("data_dir"))
            hosts = file_config.get("hosts", [])
            if isinstance(hosts, list):
                cfg["host_rows"] = [str(row) for row in hosts]
            else:
                logger.warning(f"Ignoring 'hosts' config entry; expected a list of rows, got {type(hosts).__name__}")
            for key in ("progress", "verbose"):
                if key in file_config:
                    cfg[key] = bool(file_config[key])

        env = os.environ
        prefix = env_prefix.upper()

        hosts_csv = env.get(f"{prefix}HOSTS_CSV")
        if hosts_csv:
            cfg["hosts_csv"] = _coerce_path(hosts_csv)
        data_dir = env.get(f"{prefix}DATA_DIR")
        if data_dir:
            cfg["data_dir"] = _coerce_path(data_dir)
        cfg["progress"] = _coerce_bool(env.get(f"{prefix}PROGRESS"), bool(cfg["progress"]))
        cfg["verbose"] = _coerce_bool(env.get(f"{prefix}VERBOSE"), bool(cfg["verbose"]))

        if config:
            for key, value in config.items():
                if value is None or key not in cfg:
                    continue
                if key in ("hosts_csv", "data_dir"):
                    cfg[key] = _coerce_path(value)
                elif key == "host_rows":
                    if value:
                        cfg[key] = list(value)
                else:
                    cfg[key] = bool(value)

        return cls(**cfg)


def load_settings(
    config: Mapping[str, Any] | None = None,
    config_path: Optional[Path] = None,
    env_prefix: str = "CLOUDCHECK_",
) -> CloudCheckSettings:
    """Convenience wrapper used by CLI entry points."""
    return CloudCheckSettings.from_sources(
        config=config,
        file_config=load_config_file(config_path),
        env_prefix=env_prefix,
    )


__all__ = ["CloudCheckSettings", "load_config_file", "load_settings"]
