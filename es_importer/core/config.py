"""
Importer configuration management.

Settings are resolved in this order (first wins):
command-line flags, environment variables, an optional YAML file, defaults.

Expected YAML format:
```yaml
importer:
  host: http://localhost:9200
  batch_size: 500
  user: elastic
  password: changeme
  timeout: 30
```
"""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from es_importer.core.errors import ConfigurationError
from es_importer.core.models import Credentials, UploadTarget
from es_importer.utils.validation import (
    validate_batch_size,
    validate_credentials,
    validate_file_path,
    validate_index_name,
    validate_timeout,
)

DEFAULT_HOST = "http://localhost:9200"
DEFAULT_BATCH_SIZE = 1000

# Environment variable -> setting name
ENV_VARS = {
    "ES_HOST": "host",
    "ES_USER": "user",
    "ES_PASSWORD": "password",
    "ES_BATCH_SIZE": "batch_size",
    "ES_TIMEOUT": "timeout",
    "LOG_LEVEL": "log_level",
    "LOG_FORMAT": "log_format",
}

SETTING_NAMES = {
    "host", "batch_size", "user", "password", "timeout", "log_level", "log_format",
}


class ImporterConfig(BaseModel):
    """
    Resolved settings for one import run.

    Attributes:
        csv_file: Path of the CSV input
        index_name: Target index
        host: Base URL of the cluster (http only)
        batch_size: Documents per bulk request
        user: Basic-Auth user (requires password)
        password: Basic-Auth password (requires user)
        timeout: Socket timeout in seconds; None waits forever
        log_level: Logging level name
        log_format: "json" or "text"
    """

    csv_file: str
    index_name: str
    host: str = DEFAULT_HOST
    batch_size: int = DEFAULT_BATCH_SIZE
    user: str | None = None
    password: str | None = Field(None, repr=False)
    timeout: float | None = None
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("csv_file")
    @classmethod
    def check_csv_file(cls, v):
        return validate_file_path(v, "csv_file")

    @field_validator("index_name")
    @classmethod
    def check_index_name(cls, v):
        return validate_index_name(v)

    @field_validator("batch_size")
    @classmethod
    def check_batch_size(cls, v):
        return validate_batch_size(v)

    @field_validator("timeout")
    @classmethod
    def check_timeout(cls, v):
        return validate_timeout(v)

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v):
        return v.upper()

    @property
    def target(self) -> UploadTarget:
        """
        Resolve the upload target from host.

        Raises:
            InvalidTargetError: If host is not a usable http:// URL
        """
        return UploadTarget.from_url(self.host)

    @property
    def credentials(self) -> Credentials | None:
        """
        Basic-Auth credentials, or None when no user/password is configured.

        Raises:
            ConfigurationError: If only one of user and password is set
        """
        pair = validate_credentials(self.user, self.password)
        if pair is None:
            return None
        return Credentials(username=pair[0], password=pair[1])


def load_yaml_settings(config_path: str | Path) -> dict[str, Any]:
    """
    Load importer settings from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Settings dictionary (only known setting names)

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    with open(path) as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not config or "importer" not in config:
        raise ConfigurationError("Configuration file must contain 'importer' section")

    section = config["importer"]
    if not isinstance(section, dict):
        raise ConfigurationError("'importer' section must be a mapping")

    unknown = sorted(set(section) - SETTING_NAMES)
    if unknown:
        raise ConfigurationError(f"Unknown settings in {config_path}: {', '.join(unknown)}")

    return dict(section)


def load_env_settings(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Collect settings from ES_* and LOG_* environment variables."""
    environ = os.environ if environ is None else environ
    return {
        setting: environ[var]
        for var, setting in ENV_VARS.items()
        if environ.get(var)
    }


def _coerce_number(settings: dict[str, Any], name: str, kind: type) -> None:
    value = settings.get(name)
    if not isinstance(value, str):
        return
    try:
        settings[name] = kind(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got '{value}'") from e


def build_config(
    csv_file: str,
    index_name: str,
    overrides: dict[str, Any] | None = None,
    config_path: str | Path | None = None,
    environ: dict[str, str] | None = None,
) -> ImporterConfig:
    """
    Resolve the configuration for a run.

    Args:
        csv_file: CSV input path
        index_name: Target index
        overrides: Explicit settings (e.g. CLI flags); None values are ignored
        config_path: Optional YAML file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        ImporterConfig

    Raises:
        ConfigurationError: On invalid or inconsistent settings
        InvalidTargetError: If host is not a usable http:// URL
    """
    settings: dict[str, Any] = {}
    if config_path:
        settings.update(load_yaml_settings(config_path))
    settings.update(load_env_settings(environ))
    settings.update({k: v for k, v in (overrides or {}).items() if v is not None})

    _coerce_number(settings, "batch_size", int)
    _coerce_number(settings, "timeout", float)

    try:
        config = ImporterConfig(csv_file=csv_file, index_name=index_name, **settings)
    except ValueError as e:
        # pydantic wraps validator errors; surface them as configuration errors
        raise ConfigurationError(str(e)) from e

    # Fail fast before any network activity
    UploadTarget.from_url(config.host)
    validate_credentials(config.user, config.password)
    return config
