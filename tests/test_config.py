"""Tests for configuration loading (job_tracker/config.py)."""

from pathlib import Path

import pytest

from job_tracker import config as config_module
from job_tracker.config import Config, get_config, load_config


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    monkeypatch.setattr(config_module, "_config", None)


def test_defaults_when_default_file_missing(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", tmp_path / "absent.yaml")
    config = load_config()

    assert config.storage_key == "job_tracker_entries"
    assert config.storage_warning_bytes == 4718592
    assert config.export_sheet_name == "Job Entries"
    assert config.default_sort_key == "applied_date"
    assert config.default_sort_direction == "desc"


def test_explicit_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_loads_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "data_path: /var/lib/tracker/store.sqlite\n"
        "log_level: DEBUG\n"
        "storage_warning_bytes: 1024\n"
        "default_sort_direction: asc\n"
    )
    config = load_config(path)

    assert config.data_path == Path("/var/lib/tracker/store.sqlite")
    assert config.log_level == "DEBUG"
    assert config.storage_warning_bytes == 1024
    assert config.default_sort_direction == "asc"
    assert get_config() is config


def test_empty_yaml_means_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == Config()


def test_config_is_cached(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("log_level: WARNING\n")
    first = load_config(path)
    assert load_config(tmp_path / "ignored.yaml") is first
