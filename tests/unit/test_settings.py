"""Unit tests for settings module."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from cloudcheck.settings import CloudCheckSettings, _coerce_bool, load_config_file, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove CLOUDCHECK_* variables so host settings do not leak into tests."""
    for name in ("CLOUDCHECK_HOSTS_CSV", "CLOUDCHECK_DATA_DIR", "CLOUDCHECK_PROGRESS", "CLOUDCHECK_VERBOSE"):
        monkeypatch.delenv(name, raising=False)


class TestCoercionHelpers:
    """Test the helper functions for type coercion."""

    def test_coerce_bool_true_values(self) -> None:
        """Test boolean coercion with truthy string values."""
        for value in ["1", "true", "TRUE", "t", "yes", "Y", "on"]:
            assert _coerce_bool(value, False) is True, f"Expected {value} to coerce to True"

    def test_coerce_bool_false_values(self) -> None:
        """Test boolean coercion with falsy string values."""
        for value in ["0", "false", "F", "no", "n", "OFF"]:
            assert _coerce_bool(value, True) is False, f"Expected {value} to coerce to False"

    def test_coerce_bool_invalid_values_use_default(self) -> None:
        """Test boolean coercion with invalid values falls back to default."""
        for value in ["maybe", "2", "", "   ", None]:
            assert _coerce_bool(value, True) is True
            assert _coerce_bool(value, False) is False


class TestCloudCheckSettings:
    """Test CloudCheckSettings.from_sources precedence."""

    def test_defaults(self) -> None:
        """Without any source every option has its default."""
        settings = CloudCheckSettings.from_sources()
        assert settings.hosts_csv is None
        assert settings.host_rows == []
        assert settings.data_dir is None
        assert settings.progress is False
        assert settings.verbose is False

    def test_file_config_values(self) -> None:
        """Config file values are applied over defaults."""
        settings = CloudCheckSettings.from_sources(
            file_config={
                "hosts_csv": "hosts.csv",
                "data_dir": "/srv/ranges",
                "hosts": ["AWS,data/aws-ranges.json,/prefixes,ip_prefix"],
                "progress": True,
            }
        )
        assert settings.hosts_csv == Path("hosts.csv")
        assert settings.data_dir == Path("/srv/ranges")
        assert settings.host_rows == ["AWS,data/aws-ranges.json,/prefixes,ip_prefix"]
        assert settings.progress is True

    def test_non_list_hosts_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        """A 'hosts' entry that is not a list is ignored with a warning."""
        with caplog.at_level(logging.WARNING, logger="cloudcheck.settings"):
            settings = CloudCheckSettings.from_sources(file_config={"hosts": "A,B,C,D"})
        assert settings.host_rows == []
        assert "expected a list" in caplog.text

    def test_environment_overrides_file(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables win over config file values."""
        monkeypatch.setenv("CLOUDCHECK_HOSTS_CSV", "/etc/cloudcheck/hosts.csv")
        monkeypatch.setenv("CLOUDCHECK_VERBOSE", "yes")
        settings = CloudCheckSettings.from_sources(file_config={"hosts_csv": "hosts.csv", "verbose": False})
        assert settings.hosts_csv == Path("/etc/cloudcheck/hosts.csv")
        assert settings.verbose is True

    def test_explicit_config_overrides_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Explicit values win over the environment; None values are ignored."""
        monkeypatch.setenv("CLOUDCHECK_DATA_DIR", "/from/env")
        settings = CloudCheckSettings.from_sources(
            config={"data_dir": Path("/from/cli"), "hosts_csv": None, "host_rows": None}
        )
        assert settings.data_dir == Path("/from/cli")
        assert settings.hosts_csv is None

    def test_custom_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A custom prefix selects different environment variables."""
        monkeypatch.setenv("MYCHECK_PROGRESS", "1")
        assert CloudCheckSettings.from_sources(env_prefix="mycheck_").progress is True


class TestLoadConfigFile:
    """Test TOML config loading."""

    def test_reads_cloudcheck_table(self, tmp_path: Path) -> None:
        """The [cloudcheck] table is returned."""
        path = tmp_path / "cloudcheck.toml"
        path.write_text('[cloudcheck]\ndata_dir = "/srv/ranges"\nhosts = ["A,b.json,/p,f"]\n', encoding="utf-8")
        assert load_config_file(path) == {"data_dir": "/srv/ranges", "hosts": ["A,b.json,/p,f"]}

    def test_missing_file_returns_empty(self, tmp_path: Path) -> None:
        """A missing explicit file gives an empty config."""
        assert load_config_file(tmp_path / "absent.toml") == {}

    def test_default_locations(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """config/cloudcheck.toml is found relative to the working directory."""
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "cloudcheck.toml").write_text("[cloudcheck]\nverbose = true\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert load_config_file() == {"verbose": True}
        assert load_settings().verbose is True

    def test_malformed_toml_is_ignored(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Syntax errors log a warning and fall back to defaults."""
        path = tmp_path / "cloudcheck.toml"
        path.write_text("[cloudcheck\n", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="cloudcheck.settings"):
            assert load_config_file(path) == {}
        assert "Failed to parse" in caplog.text

    def test_load_settings_combines_sources(self, tmp_path: Path) -> None:
        """load_settings() merges file and explicit values."""
        path = tmp_path / "cloudcheck.toml"
        path.write_text('[cloudcheck]\nhosts_csv = "hosts.csv"\n', encoding="utf-8")
        settings = load_settings(config={"progress": True}, config_path=path)
        assert settings.hosts_csv == Path("hosts.csv")
        assert settings.progress is True
