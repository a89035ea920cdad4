"""
Configuration loading and validation for hillpulse.

All settings come from the process environment (optionally seeded from a
.env file). load_config() overlays the environment on DEFAULT_CONFIG and
validates the result, returning a nested dictionary that every component
reads its section from.

Missing notifier credentials are not an error: the notifier simply reports
itself as unconfigured. Only malformed values (a non-numeric port, a
negative timeout) raise ConfigError.
"""

import copy
import os
from typing import Dict, Any, Optional, Mapping

from dotenv import load_dotenv

from .errors import ConfigError, ErrorCode
from .prompts import PROMPT_VERSION
from .utils import parse_bool


# Default configuration values
DEFAULT_CONFIG = {
    "server": {
        "host": "0.0.0.0",
        "port": 10000,
        "secret": "",
    },
    "features": {
        "dedup": True,
        "email": True,
    },
    "http": {
        "timeout_seconds": 30,
    },
    "llm": {
        "provider": "gemini",
        "api_key": "",
        "model": "gemini-2.0-flash-lite",
        "prompt_file": "",
    },
    "retry": {
        "max_attempts": 4,
        "initial_delay_seconds": 1,
        "backoff_multiplier": 2,
    },
    "dedup": {
        "retention_hours": 24,
    },
    "pushover": {
        "api_token": "",
        "user_key": "",
        "title": "HillPulse",
    },
    "email": {
        "host": "",
        "port": 587,
        "user": "",
        "password": "",
        "to": "",
        "sender": "",
    },
    "logging": {
        "level": "INFO",
        "file": "",
    },
}

# Environment variable -> (section, key, type)
ENV_VARS = {
    "HOST": ("server", "host", str),
    "PORT": ("server", "port", int),
    "HILLPULSE_SECRET": ("server", "secret", str),
    "HILLPULSE_DEDUP_ENABLED": ("features", "dedup", bool),
    "HILLPULSE_EMAIL_ENABLED": ("features", "email", bool),
    "HTTP_TIMEOUT_SECONDS": ("http", "timeout_seconds", float),
    "GEMINI_API_KEY": ("llm", "api_key", str),
    "GEMINI_MODEL": ("llm", "model", str),
    "HILLPULSE_PROMPT_FILE": ("llm", "prompt_file", str),
    "SUMMARY_MAX_ATTEMPTS": ("retry", "max_attempts", int),
    "SUMMARY_INITIAL_DELAY_SECONDS": ("retry", "initial_delay_seconds", float),
    "DEDUP_RETENTION_HOURS": ("dedup", "retention_hours", float),
    "PUSHOVER_API_TOKEN": ("pushover", "api_token", str),
    "PUSHOVER_USER_KEY": ("pushover", "user_key", str),
    "SMTP_HOST": ("email", "host", str),
    "SMTP_PORT": ("email", "port", int),
    "SMTP_USER": ("email", "user", str),
    "SMTP_PASS": ("email", "password", str),
    "EMAIL_TO": ("email", "to", str),
    "EMAIL_FROM": ("email", "sender", str),
    "LOG_LEVEL": ("logging", "level", str),
    "LOG_FILE": ("logging", "file", str),
}


def load_env_file(env_path: Optional[str] = None) -> bool:
    """
    Load a .env file into the process environment.

    Existing environment variables win over values in the file.

    Args:
        env_path: Explicit .env path. If None, searches default locations.

    Returns:
        True if a file was found and loaded
    """
    search_paths = [env_path] if env_path else [
        ".env",
        os.path.join(os.path.dirname(__file__), "..", "..", ".env"),
    ]

    for path in search_paths:
        expanded = os.path.abspath(path)
        if os.path.exists(expanded):
            load_dotenv(expanded, override=False)
            return True
    return False


def load_config(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Build and validate configuration from environment variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        Validated configuration dictionary with defaults merged.

    Raises:
        ConfigError: If a variable holds a value of the wrong type or range.
    """
    if environ is None:
        environ = os.environ

    config = copy.deepcopy(DEFAULT_CONFIG)

    for var, (section, key, kind) in ENV_VARS.items():
        raw = environ.get(var)
        if raw is None or raw.strip() == "":
            continue
        config[section][key] = _coerce(var, raw.strip(), kind)

    # Sender falls back to the SMTP login, as most providers require
    if not config["email"]["sender"]:
        config["email"]["sender"] = config["email"]["user"]

    _validate_config_values(config)
    return config


def _coerce(var: str, raw: str, kind: type):
    """Convert an environment string to the declared type."""
    try:
        if kind is bool:
            return parse_bool(raw)
        return kind(raw)
    except ValueError:
        raise ConfigError(
            ErrorCode.CONFIG_INVALID_VALUE,
            f"{var} has invalid value {raw!r}"
        )


def _validate_config_values(config: Dict[str, Any]) -> None:
    """Validate configuration field values."""
    for section in ("server", "email"):
        port = config[section]["port"]
        if not 0 < port < 65536:
            raise ConfigError(
                ErrorCode.CONFIG_INVALID_VALUE,
                f"{section}.port must be between 1 and 65535"
            )

    if config["http"]["timeout_seconds"] <= 0:
        raise ConfigError(
            ErrorCode.CONFIG_INVALID_VALUE,
            "http.timeout_seconds must be positive"
        )

    retry = config["retry"]
    if retry["max_attempts"] <= 0:
        raise ConfigError(
            ErrorCode.CONFIG_INVALID_VALUE,
            "retry.max_attempts must be positive"
        )
    if retry["initial_delay_seconds"] < 0:
        raise ConfigError(
            ErrorCode.CONFIG_INVALID_VALUE,
            "retry.initial_delay_seconds cannot be negative"
        )

    if config["dedup"]["retention_hours"] <= 0:
        raise ConfigError(
            ErrorCode.CONFIG_INVALID_VALUE,
            "dedup.retention_hours must be positive"
        )


def pushover_configured(config: Dict[str, Any]) -> bool:
    """Whether Pushover credentials are present."""
    pushover = config["pushover"]
    return bool(pushover["api_token"] and pushover["user_key"])


def email_configured(config: Dict[str, Any]) -> bool:
    """Whether SMTP host, login and recipient are all present."""
    email = config["email"]
    return all([email["host"], email["user"], email["password"], email["to"]])


def describe_capabilities(config: Dict[str, Any]) -> Dict[str, str]:
    """
    Summarize which features and channels are active.

    Returns:
        Mapping of capability name to a short status string
    """
    features = config["features"]

    if not features["email"]:
        email_status = "disabled"
    elif email_configured(config):
        email_status = f"enabled ({config['email']['to']})"
    else:
        email_status = "unconfigured"

    return {
        "summarizer": "configured" if config["llm"]["api_key"] else "missing GEMINI_API_KEY",
        "pushover": "enabled" if pushover_configured(config) else "unconfigured",
        "email": email_status,
        "dedup": (
            f"enabled ({config['dedup']['retention_hours']:g}h window)"
            if features["dedup"] else "disabled"
        ),
        "auth": "shared secret" if config["server"]["secret"] else "open",
        "prompt": (
            f"file {config['llm']['prompt_file']}"
            if config["llm"]["prompt_file"] else f"built-in ({PROMPT_VERSION})"
        ),
    }
