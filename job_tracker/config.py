"""Configuration management."""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel

from .persistence import STORAGE_KEY, STORAGE_WARNING_BYTES
from .spreadsheet import DEFAULT_SHEET_NAME

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "config.yaml"


class Config(BaseModel):
    """Application configuration."""

    data_path: Path = PROJECT_ROOT / "data" / "job_tracker.sqlite"
    storage_key: str = STORAGE_KEY
    log_level: str = "INFO"
    log_dir: Path = PROJECT_ROOT / "logs"
    storage_warning_bytes: int = STORAGE_WARNING_BYTES
    export_dir: Path = Path(".")
    export_sheet_name: str = DEFAULT_SHEET_NAME
    default_sort_key: str = "applied_date"
    default_sort_direction: Literal["asc", "desc"] = "desc"
    lock_file: Path = Path("/tmp/job_tracker.lock")


_config: Optional[Config] = None


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file.

    Without an explicit path, a missing ``config/config.yaml`` means defaults.
    """
    global _config

    if _config is not None:
        return _config

    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            _config = Config()
            return _config
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}. "
            "Copy config/config.yaml.example to config/config.yaml and adjust it."
        )

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    _config = Config(**data)
    return _config


def get_config() -> Config:
    """Get the loaded configuration."""
    if _config is None:
        return load_config()
    return _config
