"""Supervisor config loading (mittorch.json or mittorch.yaml).

Config format:
- account, repository, branch: GitHub repository to track (required)
- token (optional): access token for private repositories
- interval (optional): polling interval in seconds, default 60
- start-command (optional): shell command that starts the supervised process
- stop-command (optional): shell command that stops it gracefully
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from mittorch.helpers import SUCCESS, normalize_token, status

DEFAULT_CONFIG_PATH = Path("mittorch.json")
DEFAULT_DATA_DIR = Path(".data")
DEFAULT_INTERVAL = 60

# GitHub repository names: letters, digits, underscore, hyphen, dot.
_REPO_NAME = re.compile(r"^[A-Za-z0-9_.-]+$")


class ConfigError(ValueError):
    """Config file missing, unreadable, or invalid."""


@dataclass(frozen=True)
class Config:
    account: str
    repository: str
    branch: str
    token: str | None = None
    interval: int = DEFAULT_INTERVAL
    start_command: str | None = None
    stop_command: str | None = None

    def repo_dir(self, data_dir: Path = DEFAULT_DATA_DIR) -> Path:
        return data_dir / self.repository


def _require_str(data: dict[str, Any], key: str, path: Path) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        msg = f"Missing or invalid '{key}' in {path}"
        raise ConfigError(msg)
    return value.strip()


def _repository_name(data: dict[str, Any], path: Path) -> str:
    """repository also names the checkout directory, so it must be a single safe path segment."""
    name = _require_str(data, "repository", path)
    if not _REPO_NAME.match(name) or name in (".", ".."):
        msg = f"Invalid 'repository' name {name!r} in {path}"
        raise ConfigError(msg)
    return name


def _optional_str(data: dict[str, Any], key: str, path: Path) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"'{key}' must be a string in {path}"
        raise ConfigError(msg)
    return value


def parse_config(data: Any, path: Path) -> Config:
    """Build a Config from decoded JSON/YAML data. Raises ConfigError on invalid content."""
    if not isinstance(data, dict):
        msg = f"Config must be a mapping: {path}"
        raise ConfigError(msg)
    interval = data.get("interval", DEFAULT_INTERVAL)
    # bool is an int subclass; reject it explicitly.
    if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
        msg = f"'interval' must be a positive integer in {path}"
        raise ConfigError(msg)
    return Config(
        account=_require_str(data, "account", path),
        repository=_repository_name(data, path),
        branch=_require_str(data, "branch", path),
        token=normalize_token(_optional_str(data, "token", path)),
        interval=interval,
        start_command=_optional_str(data, "start-command", path),
        stop_command=_optional_str(data, "stop-command", path),
    )


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> Config:
    """Load config from path. .yaml/.yml are parsed with pyyaml, anything else as JSON."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        msg = f"Config file not found: {path}"
        raise ConfigError(msg) from e
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Could not read config file: {path}"
        raise ConfigError(msg) from e
    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        msg = f"Could not parse config file {path}: {e}"
        raise ConfigError(msg) from e
    config = parse_config(data, path)
    status(SUCCESS, f"Loaded config from {path}")
    return config
