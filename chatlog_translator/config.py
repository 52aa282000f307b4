"""Configuration loading from CLI args, env vars, and optional YAML file.

Priority (lowest to highest): defaults, YAML file, environment, CLI flags.
"""

import logging
import os
from dataclasses import dataclass, field

import yaml

from chatlog_translator.channels import resolve_codes
from chatlog_translator.errors import ConfigurationError
from chatlog_translator.papago import DEFAULT_TIMEOUT, PAPAGO_ENDPOINT
from chatlog_translator.pipeline import EXHAUSTED_POLICIES
from chatlog_translator.tail import DEFAULT_POLL_INTERVAL

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# field name -> environment variable
ENV_VARS = {
    "log_directory": "LOG_DIRECTORY",
    "log_file": "LOG_FILE",
    "target_codes": "TARGET_CHATCODES",
    "secret_file": "SECRET_FILE_NAME",
    "source_language": "SOURCE_LANGUAGE",
    "target_language": "TARGET_LANGUAGE",
    "translate_actor_name": "TRANSLATE_ACTOR_NAME",
    "endpoint": "PAPAGO_ENDPOINT",
    "request_timeout": "REQUEST_TIMEOUT",
    "poll_interval": "POLL_INTERVAL",
    "exhausted_policy": "EXHAUSTED_POLICY",
    "log_level": "LOG_LEVEL",
}


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


def _parse_float(name: str, value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


def _split_codes(value) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return str(value).split(",")


@dataclass(frozen=True)
class Config:
    log_directory: str = ""
    log_file: str = ""
    target_codes: tuple[str, ...] = field(default_factory=tuple)
    secret_file: str = "secret.json"
    source_language: str = "ja"
    target_language: str = "ko"
    translate_actor_name: bool = False
    endpoint: str = PAPAGO_ENDPOINT
    request_timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    exhausted_policy: str = "halt"
    log_level: str = "INFO"


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must hold a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def load_config(cli_args=None, yaml_data: dict | None = None, environ=None) -> Config:
    """Build Config from defaults <- YAML <- env vars <- CLI args."""
    if environ is None:
        environ = os.environ

    raw: dict = {}
    for key, value in (yaml_data or {}).items():
        if key not in ENV_VARS:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        raw[key] = value

    for key, env_name in ENV_VARS.items():
        if env_name in environ:
            raw[key] = environ[env_name]

    if cli_args is not None:
        for key in ENV_VARS:
            value = getattr(cli_args, key, None)
            if value is not None:
                raw[key] = value

    return build_config(raw)


def build_config(raw: dict) -> Config:
    """Normalize and validate raw setting values into a Config."""
    kwargs: dict = {}
    for key in ("log_directory", "log_file", "secret_file", "source_language",
                "target_language", "endpoint"):
        if key in raw:
            kwargs[key] = str(raw[key]).strip()

    if "target_codes" in raw:
        kwargs["target_codes"] = resolve_codes(_split_codes(raw["target_codes"]))
    if "translate_actor_name" in raw:
        kwargs["translate_actor_name"] = _parse_bool(raw["translate_actor_name"])
    for key in ("request_timeout", "poll_interval"):
        if key in raw:
            kwargs[key] = _parse_float(key, raw[key])
    if "exhausted_policy" in raw:
        kwargs["exhausted_policy"] = str(raw["exhausted_policy"]).strip().lower()
    if "log_level" in raw:
        kwargs["log_level"] = str(raw["log_level"]).strip().upper()

    config = Config(**kwargs)
    validate_config(config)
    return config


def validate_config(config: Config):
    """Raise ConfigurationError if the config cannot drive a pipeline."""
    if not config.target_codes:
        raise ConfigurationError("No target chat codes configured (TARGET_CHATCODES)")
    if not config.log_file and not config.log_directory:
        raise ConfigurationError("Either a log directory or a log file is required")
    if not config.source_language or not config.target_language:
        raise ConfigurationError("Source and target languages must not be empty")
    if not config.endpoint:
        raise ConfigurationError("Translation endpoint must not be empty")
    if config.request_timeout <= 0:
        raise ConfigurationError("request_timeout must be positive")
    if config.poll_interval <= 0:
        raise ConfigurationError("poll_interval must be positive")
    if config.exhausted_policy not in EXHAUSTED_POLICIES:
        raise ConfigurationError(
            f"exhausted_policy must be one of {EXHAUSTED_POLICIES}, got {config.exhausted_policy!r}"
        )
    if config.log_level not in LOG_LEVELS:
        raise ConfigurationError(f"Unknown log level: {config.log_level!r}")
