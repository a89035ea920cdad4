"""Shared fixtures for integration tests."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from hillpulse.api import create_app
from hillpulse.config import load_config
from hillpulse.delivery.pushover import PushoverNotifier
from hillpulse.delivery.smtp import EmailNotifier
from hillpulse.llm.gemini import GeminiProvider
from hillpulse.pipeline import build_pipeline
from hillpulse.resolve import TweetTextResolver
from hillpulse.summarize import Summarizer


FIXTURES_DIR = Path(__file__).parent.parent / "fixtures" / "webhooks"

BASE_ENV = {
    "GEMINI_API_KEY": "test-gemini-key",
    "PUSHOVER_API_TOKEN": "test-token",
    "PUSHOVER_USER_KEY": "test-user",
    "SMTP_HOST": "smtp.example.com",
    "SMTP_USER": "bot@example.com",
    "SMTP_PASS": "app-password",
    "EMAIL_TO": "press@example.com",
}


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return FIXTURES_DIR


def load_fixture(name: str) -> Any:
    """Load a JSON fixture file."""
    fixture_path = FIXTURES_DIR / name
    with open(fixture_path, "r", encoding="utf-8") as f:
        return json.load(f)


def http_response(status: int = 200, json_data: Any = None, text: str = "") -> Mock:
    """Build a stand-in for requests.Response."""
    response = Mock()
    response.status_code = status
    response.ok = 200 <= status < 400
    response.text = text or (json.dumps(json_data) if json_data is not None else "")
    response.json.return_value = json_data
    return response


class Relay:
    """
    The full service with only the network boundary replaced.

    Gemini, Pushover and the embed endpoints go through Mock sessions; the
    caller patches smtplib for email.
    """

    def __init__(
        self,
        env: Optional[Dict[str, str]] = None,
        gemini: Optional[List[Mock]] = None,
        embeds: Optional[List[Mock]] = None,
    ):
        self.config = load_config({**BASE_ENV, **(env or {})})
        self.delays: List[float] = []

        self.gemini_session = Mock()
        self.gemini_session.post.side_effect = gemini or [
            http_response(json_data=load_fixture("gemini_response.json"))
        ]
        self.pushover_session = Mock()
        self.pushover_session.post.return_value = http_response(json_data={"status": 1})
        self.embed_session = Mock()
        self.embed_session.get.side_effect = embeds or []

        provider = GeminiProvider(
            api_key=self.config["llm"]["api_key"],
            session=self.gemini_session,
        )
        retry = self.config["retry"]
        summarizer = Summarizer(
            provider,
            max_attempts=retry["max_attempts"],
            initial_delay=retry["initial_delay_seconds"],
            backoff_multiplier=retry["backoff_multiplier"],
            sleep=self.delays.append,
        )
        email = self.config["email"]
        notifiers = [
            PushoverNotifier(
                self.config["pushover"]["api_token"],
                self.config["pushover"]["user_key"],
                session=self.pushover_session,
            ),
            EmailNotifier(
                host=email["host"],
                port=email["port"],
                user=email["user"],
                password=email["password"],
                recipient=email["to"],
                sender=email["sender"],
            ),
        ]

        pipeline = build_pipeline(
            self.config,
            summarizer=summarizer,
            notifiers=notifiers,
            resolver=TweetTextResolver(session=self.embed_session),
        )
        self.app = create_app(config=self.config, pipeline=pipeline)
        self.client = TestClient(self.app, raise_server_exceptions=False)

    @property
    def gemini_calls(self) -> int:
        return self.gemini_session.post.call_count

    @property
    def pushes(self) -> List[Dict[str, str]]:
        return [c.kwargs["data"] for c in self.pushover_session.post.call_args_list]

    def ingest(self, payload: Any, **kwargs):
        return self.client.post("/ingest", json=payload, **kwargs)
