from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from castsync.config import (
    ConfigurationError,
    SyncConfig,
    get_database_config,
    get_storage_config,
    get_sync_config,
    node_type_env_var,
    optional_env_int,
)
from castsync.config.storage import DEFAULT_DB_FILENAME
from castsync.domain.reconciliation import SCRIPT_ANALYZER, SCRIPT_GENERATOR


def test_optional_env_int_handles_unset_and_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXAMPLE_INT", raising=False)
    assert optional_env_int("EXAMPLE_INT") is None

    monkeypatch.setenv("EXAMPLE_INT", "  ")
    assert optional_env_int("EXAMPLE_INT") is None

    monkeypatch.setenv("EXAMPLE_INT", " 42 ")
    assert optional_env_int("EXAMPLE_INT") == 42


def test_optional_env_int_rejects_invalid_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_INT", "soon")
    with pytest.raises(ConfigurationError, match="EXAMPLE_INT"):
        optional_env_int("EXAMPLE_INT")

    monkeypatch.setenv("EXAMPLE_INT", "-5")
    with pytest.raises(ConfigurationError, match=">= 0"):
        optional_env_int("EXAMPLE_INT", minimum=0)


def test_node_type_env_var() -> None:
    assert node_type_env_var("script_generator") == "CASTSYNC_DEBOUNCE_MS_SCRIPT_GENERATOR"


def test_get_sync_config_reads_default_and_per_type(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CASTSYNC_DEBOUNCE_MS", "150")
    monkeypatch.setenv("CASTSYNC_DEBOUNCE_MS_SCRIPT_GENERATOR", "20")
    monkeypatch.delenv("CASTSYNC_DEBOUNCE_MS_SCRIPT_ANALYZER", raising=False)

    config = get_sync_config(["script_analyzer", "script_generator"])

    assert config.apply(SCRIPT_ANALYZER).debounce_ms == 150
    assert config.apply(SCRIPT_GENERATOR).debounce_ms == 20


def test_empty_sync_config_keeps_profile_delays() -> None:
    assert SyncConfig().debounce_ms_for(SCRIPT_GENERATOR) == SCRIPT_GENERATOR.debounce_ms


def test_get_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("CASTSYNC_DATA_DIR", str(custom))

    assert get_storage_config().data_dir == custom.resolve()


def test_get_storage_config_defaults_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("CASTSYNC_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    config = get_storage_config()

    assert config.data_dir == (tmp_path / "castsync").resolve()
    assert not config.data_dir.exists()


def test_get_database_config_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert get_database_config().uri == "sqlite:///override.db"


def test_get_database_config_creates_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("CASTSYNC_DATA_DIR", str(tmp_path / "data-dir"))

    uri = get_database_config().uri

    expected_path = (tmp_path / "data-dir" / DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()
