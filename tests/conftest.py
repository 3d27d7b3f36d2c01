"""Shared pytest fixtures for cloudcheck tests."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tests.fixtures.range_fixtures import AWS_RANGES, GCP_RANGES  # noqa: E402


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Return a helper writing a JSON document under ``tmp_path``."""

    def _write(name: str, payload: Any) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Directory laid out like the shipped ``data/`` folder of range documents."""
    root = tmp_path / "ranges"
    (root / "data").mkdir(parents=True)
    (root / "data" / "google-cloud-ranges.json").write_text(json.dumps(GCP_RANGES), encoding="utf-8")
    (root / "data" / "aws-ranges.json").write_text(json.dumps(AWS_RANGES), encoding="utf-8")
    return root


@pytest.fixture
def hosts_csv(data_dir: Path) -> Path:
    """Hosts CSV pointing at the documents in ``data_dir``."""
    path = data_dir / "hosts.csv"
    path.write_text(
        "HOSTNAME,PATH,POINTER,FIELD\n"
        f"Google Cloud,{data_dir / 'data' / 'google-cloud-ranges.json'},/prefixes,ipv4Prefix\n"
        f"Amazon Web Services,{data_dir / 'data' / 'aws-ranges.json'},/prefixes,ip_prefix\n",
        encoding="utf-8",
    )
    return path
