"""Process configuration for the T2P gateway.

Settings are loaded in two phases:

1. ``APP_ENV`` selects the environment (development, production or test) and
   with it the ``.env.<APP_ENV>`` file to read. A missing file is an error.
2. The env file merged with the process environment (process values win) is
   validated against a JSON Schema. Every violation is reported at once.

Usage:
    >>> from t2p_gateway.config import load_settings
    >>> settings = load_settings(environ={
    ...     "APP_ENV": "test",
    ...     "T2P_USERNAME": "agent",
    ...     "T2P_PASSWORD": "secret",
    ...     "T2P_PSEUDOCODE": "KTM1",
    ... })
    >>> settings.port
    3000
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from dotenv import dotenv_values
from jsonschema import Draft7Validator

from t2p_gateway.errors import ConfigurationError

logger = logging.getLogger(__name__)

APP_ENVIRONMENTS = ("development", "production", "test")

DEFAULT_PORT = "3000"
DEFAULT_BASE_URL = "https://uat-tpe.tune2protect.com/RestZeusAPI/api/Zeus"

SETTINGS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "APP_ENV": {"type": "string", "enum": list(APP_ENVIRONMENTS)},
        "PORT": {"type": "string", "pattern": "^[0-9]+$"},
        "T2P_USERNAME": {"type": "string", "minLength": 1},
        "T2P_PASSWORD": {"type": "string", "minLength": 1},
        "T2P_PSEUDOCODE": {"type": "string", "minLength": 1},
        "T2P_BASE_URL": {"type": "string", "pattern": "^https?://"},
    },
    "required": ["APP_ENV", "T2P_USERNAME", "T2P_PASSWORD", "T2P_PSEUDOCODE"],
}

_settings_validator = Draft7Validator(SETTINGS_SCHEMA)


@dataclass(frozen=True)
class Settings:
    """Validated gateway settings.

    Attributes:
        app_env: Deployment environment name
        port: TCP port the HTTP server listens on
        username: Tune2Protect API username
        password: Tune2Protect API password
        pseudocode: Agency pass-code issued by Tune2Protect
        base_url: Root URL of the Zeus API, without a trailing slash
    """
    app_env: str
    port: int
    username: str
    password: str
    pseudocode: str
    base_url: str = DEFAULT_BASE_URL

    def __repr__(self) -> str:
        return (
            f"Settings(app_env={self.app_env!r}, port={self.port}, "
            f"username={self.username!r}, base_url={self.base_url!r})"
        )


def env_file_for(app_env: str, config_dir: Union[str, Path, None] = None) -> Path:
    """Path of the env file for ``app_env`` (e.g., ``.env.production``)."""
    return Path(config_dir or os.getcwd()).resolve() / f".env.{app_env}"


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    config_dir: Union[str, Path, None] = None,
) -> Settings:
    """Load and validate settings.

    Args:
        environ: Explicit variables to validate. When given, no env file is
            read and the process environment is ignored.
        config_dir: Directory holding the ``.env.<APP_ENV>`` files (defaults to
            the current working directory)

    Returns:
        A frozen Settings instance

    Raises:
        ConfigurationError: If APP_ENV is invalid, the env file is missing or
            any variable fails validation
    """
    if environ is None:
        environ = _read_environment(config_dir)

    values = {key: value for key, value in environ.items() if key in SETTINGS_SCHEMA["properties"]}
    errors = sorted(_settings_validator.iter_errors(values), key=lambda e: list(e.path))
    if errors:
        raise ConfigurationError(
            "Invalid environment configuration",
            issues=[_describe(error) for error in errors],
        )

    settings = Settings(
        app_env=values["APP_ENV"],
        port=int(values.get("PORT") or DEFAULT_PORT),
        username=values["T2P_USERNAME"],
        password=values["T2P_PASSWORD"],
        pseudocode=values["T2P_PSEUDOCODE"],
        base_url=(values.get("T2P_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
    )
    logger.info("Environment variables validated (%s, port %d)", settings.app_env, settings.port)
    return settings


def _read_environment(config_dir: Union[str, Path, None]) -> Dict[str, str]:
    app_env = os.environ.get("APP_ENV")
    if app_env not in APP_ENVIRONMENTS:
        raise ConfigurationError(
            "APP_ENV must be one of: " + ", ".join(APP_ENVIRONMENTS),
            issues=[f"APP_ENV: got {app_env!r}"],
        )

    env_file = env_file_for(app_env, config_dir)
    if not env_file.is_file():
        raise ConfigurationError(
            f"Environment file not found: {env_file.name}",
            issues=[f"expected at {env_file}", f"APP_ENV={app_env}"],
        )

    merged: Dict[str, str] = {
        key: value for key, value in dotenv_values(env_file).items() if value is not None
    }
    merged.update(os.environ)
    return merged


def _describe(error) -> str:
    """Render a jsonschema error as "KEY: problem"."""
    if error.validator == "required":
        missing = error.message.split("'")[1] if "'" in error.message else "value"
        return f"{missing}: is required"
    key = ".".join(str(p) for p in error.path) or "environment"
    if error.validator == "minLength":
        return f"{key}: must not be empty"
    if error.validator == "enum":
        return f"{key}: must be one of {', '.join(error.validator_value)}"
    if error.validator == "pattern":
        return f"{key}: does not match {error.validator_value}"
    return f"{key}: {error.message}"


__all__ = [
    "APP_ENVIRONMENTS",
    "DEFAULT_BASE_URL",
    "Settings",
    "env_file_for",
    "load_settings",
]
