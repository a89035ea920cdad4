"""Tests for configuration loading and validation."""

import os
import pytest
from unittest.mock import patch

from hillpulse.config import (
    load_config, load_env_file, describe_capabilities,
    pushover_configured, email_configured, DEFAULT_CONFIG,
)
from hillpulse.errors import ConfigError, ErrorCode


def test_defaults_with_empty_environment():
    """Empty environment yields the defaults."""
    cfg = load_config({})
    assert cfg["server"]["port"] == 10000
    assert cfg["server"]["secret"] == ""
    assert cfg["llm"]["model"] == "gemini-2.0-flash-lite"
    assert cfg["retry"]["max_attempts"] == 4
    assert cfg["retry"]["initial_delay_seconds"] == 1
    assert cfg["dedup"]["retention_hours"] == 24
    assert cfg["features"] == {"dedup": True, "email": True}
    assert cfg["email"]["port"] == 587


def test_defaults_not_mutated():
    """Loading config never mutates DEFAULT_CONFIG."""
    load_config({"GEMINI_API_KEY": "k", "PORT": "8080"})
    assert DEFAULT_CONFIG["llm"]["api_key"] == ""
    assert DEFAULT_CONFIG["server"]["port"] == 10000


def test_environment_overrides():
    """Environment variables override defaults with proper types."""
    cfg = load_config({
        "GEMINI_API_KEY": "key",
        "PORT": "8080",
        "HILLPULSE_SECRET": "s3cret",
        "HILLPULSE_DEDUP_ENABLED": "false",
        "HTTP_TIMEOUT_SECONDS": "12.5",
        "SMTP_PORT": "465",
        "SUMMARY_MAX_ATTEMPTS": "2",
    })
    assert cfg["llm"]["api_key"] == "key"
    assert cfg["server"]["port"] == 8080
    assert cfg["server"]["secret"] == "s3cret"
    assert cfg["features"]["dedup"] is False
    assert cfg["http"]["timeout_seconds"] == 12.5
    assert cfg["email"]["port"] == 465
    assert cfg["retry"]["max_attempts"] == 2


def test_blank_values_ignored():
    """Blank environment values keep the default."""
    cfg = load_config({"PORT": "  ", "GEMINI_MODEL": ""})
    assert cfg["server"]["port"] == 10000
    assert cfg["llm"]["model"] == "gemini-2.0-flash-lite"


def test_email_sender_defaults_to_user():
    cfg = load_config({"SMTP_USER": "bot@example.com"})
    assert cfg["email"]["sender"] == "bot@example.com"

    cfg = load_config({"SMTP_USER": "bot@example.com", "EMAIL_FROM": "alerts@example.com"})
    assert cfg["email"]["sender"] == "alerts@example.com"


def test_invalid_int_raises():
    with pytest.raises(ConfigError) as exc:
        load_config({"PORT": "abc"})
    assert exc.value.code == ErrorCode.CONFIG_INVALID_VALUE
    assert "PORT" in exc.value.message


def test_invalid_bool_raises():
    with pytest.raises(ConfigError) as exc:
        load_config({"HILLPULSE_EMAIL_ENABLED": "sometimes"})
    assert exc.value.code == ErrorCode.CONFIG_INVALID_VALUE


@pytest.mark.parametrize("env", [
    {"PORT": "0"},
    {"PORT": "70000"},
    {"HTTP_TIMEOUT_SECONDS": "0"},
    {"SUMMARY_MAX_ATTEMPTS": "0"},
    {"SUMMARY_INITIAL_DELAY_SECONDS": "-1"},
    {"DEDUP_RETENTION_HOURS": "0"},
])
def test_out_of_range_values_raise(env):
    with pytest.raises(ConfigError) as exc:
        load_config(env)
    assert exc.value.code == ErrorCode.CONFIG_INVALID_VALUE


def test_reads_os_environ_by_default():
    with patch.dict(os.environ, {"GEMINI_MODEL": "gemini-test"}):
        cfg = load_config()
    assert cfg["llm"]["model"] == "gemini-test"


class TestCredentialsChecks:
    """Tests for notifier credential detection."""

    def test_pushover_needs_both(self):
        assert not pushover_configured(load_config({"PUSHOVER_API_TOKEN": "t"}))
        assert pushover_configured(load_config({
            "PUSHOVER_API_TOKEN": "t", "PUSHOVER_USER_KEY": "u"
        }))

    def test_email_needs_all_four(self):
        env = {
            "SMTP_HOST": "smtp.example.com",
            "SMTP_USER": "bot",
            "SMTP_PASS": "pw",
        }
        assert not email_configured(load_config(env))
        env["EMAIL_TO"] = "staff@example.com"
        assert email_configured(load_config(env))


def test_describe_capabilities():
    cfg = load_config({
        "GEMINI_API_KEY": "k",
        "HILLPULSE_EMAIL_ENABLED": "no",
        "HILLPULSE_SECRET": "s",
    })
    caps = describe_capabilities(cfg)
    assert caps["summarizer"] == "configured"
    assert caps["pushover"] == "unconfigured"
    assert caps["email"] == "disabled"
    assert caps["dedup"] == "enabled (24h window)"
    assert caps["auth"] == "shared secret"


def test_describe_capabilities_missing_key():
    caps = describe_capabilities(load_config({}))
    assert caps["summarizer"] == "missing GEMINI_API_KEY"
    assert caps["email"] == "unconfigured"
    assert caps["auth"] == "open"


def test_load_env_file(tmp_path):
    """.env values are loaded but don't override existing variables."""
    env_file = tmp_path / ".env"
    env_file.write_text("HILLPULSE_TEST_A=from_file\nHILLPULSE_TEST_B=from_file\n")

    with patch.dict(os.environ, {"HILLPULSE_TEST_B": "from_env"}):
        assert load_env_file(str(env_file)) is True
        assert os.environ["HILLPULSE_TEST_A"] == "from_file"
        assert os.environ["HILLPULSE_TEST_B"] == "from_env"


def test_load_env_file_missing(tmp_path):
    assert load_env_file(str(tmp_path / "nope.env")) is False


def test_describe_capabilities_prompt():
    from hillpulse.prompts import PROMPT_VERSION

    assert describe_capabilities(load_config({}))["prompt"] == f"built-in ({PROMPT_VERSION})"
    caps = describe_capabilities(load_config({"HILLPULSE_PROMPT_FILE": "/etc/hillpulse/prompt.txt"}))
    assert caps["prompt"] == "file /etc/hillpulse/prompt.txt"
