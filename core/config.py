"""Configuration models and loading."""

import json
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.exceptions import ConfigurationError

CONFIG_DIR = Path.home() / ".config" / "ghraw-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"

# Environment variable -> (section, field). Section None means a top-level field.
ENV_KEYS: dict[str, tuple[str | None, str]] = {
    "PROXY_HOST": ("proxy", "host"),
    "PROXY_PORT": ("proxy", "port"),
    "GH_NAME": ("repository", "owner"),
    "GH_REPO": ("repository", "name"),
    "GH_BRANCH": ("repository", "branch"),
    "GH_TOKEN": ("auth", "upstream_token"),
    "TOKEN": ("auth", "alias_token"),
    "TOKEN_PATH": ("auth", "token_path"),
    "URL302": ("home", "redirect_pool"),
    "URL": ("home", "origin_pool"),
    "ERROR": (None, "error_message"),
}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ProxySettings(_Frozen):
    host: str = "127.0.0.1"
    port: int = 8080


class LimitsSettings(_Frozen):
    max_connections: int = 100
    max_keepalive_connections: int = 20
    keep_alive_timeout: int = 5
    upstream_timeout: float = 300.0


class UpstreamSettings(_Frozen):
    base_url: str = "https://raw.githubusercontent.com"


class RepositorySettings(_Frozen):
    owner: str = ""
    name: str = ""
    branch: str = ""


class AuthSettings(_Frozen):
    upstream_token: str = ""
    alias_token: str = ""
    token_path: str = ""


class HomeSettings(_Frozen):
    redirect_pool: str = ""
    origin_pool: str = ""


class Config(_Frozen):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    limits: LimitsSettings = Field(default_factory=LimitsSettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    repository: RepositorySettings = Field(default_factory=RepositorySettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    home: HomeSettings = Field(default_factory=HomeSettings)
    error_message: str = ""


def load_config(
    config_file: Path = CONFIG_FILE,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Load configuration from the JSON file, then overlay environment variables.

    A missing file yields defaults. A corrupted file is moved aside to
    ``config.json.bak`` and defaults are used instead. Invalid environment
    values raise ``ConfigurationError``.
    """
    data = _read_config_file(config_file)
    overrides = env_overrides(os.environ if environ is None else environ)
    for section, values in overrides.items():
        if section is None:
            data.update(values)
        else:
            merged = dict(data.get(section) or {})
            merged.update(values)
            data[section] = merged

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid environment configuration: {e}") from e


def env_overrides(environ: Mapping[str, str]) -> dict[str | None, dict[str, str]]:
    """Collect non-empty configuration values from the environment."""
    overrides: dict[str | None, dict[str, str]] = {}
    for env_key, (section, field) in ENV_KEYS.items():
        value = environ.get(env_key)
        if value:
            overrides.setdefault(section, {})[field] = value
    return overrides


def _read_config_file(config_file: Path) -> dict:
    if not config_file.exists():
        return {}
    try:
        data = json.loads(config_file.read_text())
        Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and fall back to defaults
        _backup_config(config_file)
        return {}
    return data


def _backup_config(config_file: Path) -> Path:
    backup = config_file.with_suffix(".json.bak")
    config_file.rename(backup)
    return backup
