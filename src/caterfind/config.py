"""Configuration management for CaterFind."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CATERFIND_HOME = Path(os.environ.get("CATERFIND_HOME", Path.home() / "caterfind"))
CONFIG_FILE = CATERFIND_HOME / "config" / "caterfind.conf"


@dataclass
class Config:
    """CaterFind configuration."""

    api_base_url: str = "http://localhost:8080"
    # Caterer whose calendar the CLI works on when --owner is not given
    owner_id: int | None = None
    request_timeout: float = 10.0
    message_timeout: float = 3.0


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_number(key: str, value: str, cast, default):
    try:
        return cast(value)
    except ValueError:
        logger.warning(f"Invalid {key.upper()} value {value!r}, using {default}")
        return default


def load_config(path: Path | None = None) -> Config:
    """Load configuration from caterfind.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
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
            case "owner_id":
                config.owner_id = _parse_number(key, value, int, None) if value else None
            case "request_timeout":
                config.request_timeout = _parse_number(key, value, float, config.request_timeout)
            case "message_timeout":
                config.message_timeout = _parse_number(key, value, float, config.message_timeout)

    return config
