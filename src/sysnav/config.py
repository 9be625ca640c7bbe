"""
Global Configuration.

Settings are layered: built-in defaults, then `.sysnav/config.yaml`, then
environment variables. The SUPABASE_* names are accepted as fallbacks so an
existing hosted project can be pointed at without renaming its variables.
"""

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .core.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path(".sysnav/config.yaml")

DEFAULT_ROOT_ID = "00000000-0000-0000-0000-000000000001"
DEFAULT_ROOT_NAME = "Root System"

# Request timeout for the REST backend, in seconds
DEFAULT_TIMEOUT = 10.0

# Environment variable -> settings field; first match wins
ENV_OVERRIDES = {
    "backend": ("SYSNAV_BACKEND",),
    "url": ("SYSNAV_URL", "SUPABASE_URL"),
    "api_key": ("SYSNAV_API_KEY", "SUPABASE_ANON_KEY"),
    "root_id": ("SYSNAV_ROOT_ID",),
    "user": ("SYSNAV_USER",),
}


class Settings(BaseModel):
    """Connection and navigation settings."""
    backend: Literal["rest", "memory"] = "rest"
    url: Optional[str] = None
    api_key: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    root_id: str = DEFAULT_ROOT_ID
    root_name: str = DEFAULT_ROOT_NAME
    user: str = "anonymous"

    def to_yaml_dict(self) -> Dict[str, Any]:
        return {"version": "1.0", "store": self.model_dump(exclude_none=True)}


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    store = data.get("store", {})
    if not isinstance(store, dict):
        raise ConfigError(f"'store' section in {config_path} must be a mapping")
    return store


def _read_environment() -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for field_name, env_names in ENV_OVERRIDES.items():
        for env_name in env_names:
            value = os.getenv(env_name)
            if value:
                values[field_name] = value
                break
    return values


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """
    Load settings from the config file and environment.

    Raises:
        ConfigError: The file is malformed or a value fails validation.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    merged = {**_read_config_file(path), **_read_environment()}

    try:
        return Settings.model_validate(merged)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e


def write_settings(settings: Settings, config_path: Optional[Path] = None) -> Path:
    """Write settings to a YAML config file, creating its directory."""
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(settings.to_yaml_dict(), f, default_flow_style=False, sort_keys=False)
    return path
