"""Configuration management for tasksync."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

TASKSYNC_HOME = Path(os.environ.get("TASKSYNC_HOME", Path.home() / "tasksync"))
CONFIG_FILE = TASKSYNC_HOME / "config" / "tasksync.conf"
DATA_DIR = TASKSYNC_HOME / "data"

ID_POLICIES = ("remote", "local")


@dataclass
class Config:
    """tasksync configuration."""

    api_base_url: str = "https://jsonplaceholder.typicode.com"
    page_size: int = 20
    request_timeout: float = 10.0
    max_attempts: int = 3
    retry_base_delay: float = 1.0
    # "remote" trusts the id the server returns on create,
    # "local" mints one from the clock and never calls the server
    id_policy: str = "remote"
    # The placeholder fixture has no priority/createdAt, so they are made up
    simulate_fields: bool = True
    storage_dir: str = ""
    storage_key: str = "tasks_storage"
    user_id: int = 1

    def resolved_storage_dir(self) -> Path:
        if self.storage_dir:
            return Path(self.storage_dir).expanduser()
        return DATA_DIR


def _parse_bool(value: str) -> bool:
    return value.lower() in ("1", "true", "yes", "on")


def _parse_number(key: str, value: str, cast, default):
    try:
        return cast(value)
    except ValueError:
        logger.warning(f"Invalid value for {key.upper()}: {value!r}, using {default}")
        return default


def _unquote(value: str) -> str:
    """
    Strip matching quotes, or an inline comment from an unquoted value.

    A quoted value ends at its closing quote, so `"a # b" # note` gives `a # b`.
    """
    if value[:1] in ("\"", "'"):
        quote = value[0]
        end = value.find(quote, 1)
        return value[1:end] if end != -1 else value[1:]
    return value.split("#", 1)[0].strip()


def load_config() -> Config:
    """Load configuration from tasksync.conf file."""
    config = Config()

    if not CONFIG_FILE.exists():
        return config

    for line in CONFIG_FILE.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "api_base_url":
                config.api_base_url = value.rstrip("/")
            case "page_size":
                config.page_size = _parse_number(key, value, int, config.page_size)
            case "request_timeout":
                config.request_timeout = _parse_number(key, value, float, config.request_timeout)
            case "max_attempts":
                config.max_attempts = _parse_number(key, value, int, config.max_attempts)
            case "retry_base_delay":
                config.retry_base_delay = _parse_number(key, value, float, config.retry_base_delay)
            case "id_policy":
                if value.lower() in ID_POLICIES:
                    config.id_policy = value.lower()
                else:
                    logger.warning(f"Unknown ID_POLICY {value!r}, using {config.id_policy}")
            case "simulate_fields":
                config.simulate_fields = _parse_bool(value)
            case "storage_dir":
                config.storage_dir = value
            case "storage_key":
                config.storage_key = value
            case "user_id":
                config.user_id = _parse_number(key, value, int, config.user_id)

    return config
