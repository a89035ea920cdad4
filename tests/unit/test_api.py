"""Tests for the HTTP service."""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from hillpulse.api import create_app
from hillpulse.api.app import LIVENESS_TEXT, MAX_BODY_BYTES
from hillpulse.api.auth import KEY_HEADER, secret_matches
from hillpulse.config import load_config
from hillpulse.delivery.base import MockNotifier
from hillpulse.errors import LLMError, ErrorCode
from hillpulse.llm.base import MockLLMProvider
from hillpulse.pipeline import build_pipeline
from hillpulse.resolve import TweetTextResolver
from hillpulse.summarize import Summarizer


SUMMARY = "@repuser: Opposes stopgap spending bill\nLink: https://x.com/repuser/status/123"

PAYLOAD = {
    "data": {
        "tweet_id": "123",
        "url": "https://x.com/repuser/status/123",
        "author": "repuser",
        "text": "I will not vote for another stopgap.",
    }
}


class Harness:
    """App wired to mock collaborators."""

    def __init__(self, env=None, provider=None, resolver_text=""):
        self.config = load_config(env if env is not None else {"GEMINI_API_KEY": "k"})
        self.provider = provider if provider is not None else MockLLMProvider(response=SUMMARY)
        self.push = MockNotifier(channel="pushover")
        self.email = MockNotifier(channel="email")
        self.resolver = Mock(spec=TweetTextResolver)
        self.resolver.resolve.return_value = resolver_text

        summarizer = Summarizer(
            self.provider if self.config["llm"]["api_key"] else None,
            sleep=lambda seconds: None,
        )
        pipeline = build_pipeline(
            self.config,
            summarizer=summarizer,
            notifiers=[self.push, self.email],
            resolver=self.resolver,
        )
        self.app = create_app(config=self.config, pipeline=pipeline)
        self.client = TestClient(self.app, raise_server_exceptions=False)


@pytest.fixture
def harness():
    return Harness()


# === Liveness ===

def test_liveness(harness):
    response = harness.client.get("/")
    assert response.status_code == 200
    assert response.text == LIVENESS_TEXT
    assert response.headers["content-type"].startswith("text/plain")


def test_liveness_ignores_secret():
    harness = Harness(env={"GEMINI_API_KEY": "k", "HILLPULSE_SECRET": "s3cret"})
    assert harness.client.get("/").status_code == 200


# === Ingest ===

class TestIngest:
    """Tests for POST /ingest."""

    def test_first_delivery(self, harness):
        response = harness.client.post("/ingest", json=PAYLOAD)

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["duplicate"] is False
        assert body["summary"].startswith("@repuser:")
        assert body["pushed"] is True
        assert body["emailed"] is True
        assert len(harness.push.sends) == 1
        assert harness.email.sends[0]["title"] == "HillPulse: @repuser"

    def test_redelivery_is_duplicate(self, harness):
        harness.client.post("/ingest", json=PAYLOAD)
        response = harness.client.post("/ingest", json=PAYLOAD)

        assert response.status_code == 200
        assert response.json() == {"ok": True, "duplicate": True}
        assert len(harness.provider.calls) == 1
        assert len(harness.push.sends) == 1

    def test_legacy_tweet_field(self, harness):
        response = harness.client.post("/ingest", json={"tweet": PAYLOAD["data"]})
        assert response.status_code == 200
        assert response.json()["summary"] == SUMMARY

    def test_id_derived_from_url(self, harness):
        payload = {"data": {"url": "https://x.com/repuser/status/999", "text": "hello"}}
        harness.client.post("/ingest", json=payload)
        response = harness.client.post("/ingest", json=payload)
        assert response.json()["duplicate"] is True

    def test_missing_api_key(self):
        harness = Harness(env={})
        response = harness.client.post("/ingest", json=PAYLOAD)

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "Missing GEMINI_API_KEY"}
        assert harness.push.sends == []

    def test_no_text(self, harness):
        payload = {"data": {"tweet_id": "5", "url": "https://x.com/u/status/5"}}
        response = harness.client.post("/ingest", json=payload)

        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": "Could not retrieve tweet text"}
        harness.resolver.resolve.assert_called_once_with("https://x.com/u/status/5")

    def test_resolved_text(self):
        harness = Harness(resolver_text="Resolved text")
        payload = {"data": {"tweet_id": "5", "url": "https://x.com/u/status/5", "author": "u"}}
        response = harness.client.post("/ingest", json=payload)

        assert response.status_code == 200
        assert "Tweet text: Resolved text" in harness.provider.calls[0].prompt

    @pytest.mark.parametrize("body", [b"", b"not json", b"[1, 2, 3]", b'"string"'])
    def test_unusable_body(self, harness, body):
        response = harness.client.post(
            "/ingest", content=body, headers={"content-type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Could not retrieve tweet text"

    def test_oversized_body_rejected(self, harness):
        body = b'{"data": {"text": "' + b"x" * MAX_BODY_BYTES + b'"}}'
        response = harness.client.post(
            "/ingest", content=body, headers={"content-type": "application/json"}
        )

        assert response.status_code == 413
        assert response.json() == {"ok": False, "error": "Payload too large"}
        assert harness.provider.calls == []

    def test_large_body_under_limit_accepted(self, harness):
        payload = {"data": dict(PAYLOAD["data"], padding="x" * (MAX_BODY_BYTES // 2))}
        assert harness.client.post("/ingest", json=payload).status_code == 200

    def test_upstream_exhausted(self):
        provider = MockLLMProvider(error=LLMError(
            ErrorCode.LLM_OVERLOADED, "Gemini error 503: overloaded", status_code=503
        ))
        harness = Harness(provider=provider)

        response = harness.client.post("/ingest", json=PAYLOAD)

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "Gemini error 503: overloaded"}
        assert len(provider.calls) == 4

    def test_upstream_failure_allows_retry(self):
        provider = MockLLMProvider(outcomes=[
            LLMError(ErrorCode.LLM_API_AUTH, "Gemini error 403: denied", retryable=False),
        ], response=SUMMARY)
        harness = Harness(provider=provider)

        assert harness.client.post("/ingest", json=PAYLOAD).status_code == 500
        response = harness.client.post("/ingest", json=PAYLOAD)
        assert response.status_code == 200
        assert response.json()["duplicate"] is False

    def test_notifier_failure_still_200(self, harness):
        harness.push.error = RuntimeError("socket closed")
        response = harness.client.post("/ingest", json=PAYLOAD)

        assert response.status_code == 200
        body = response.json()
        assert body["pushed"] is False
        assert body["emailed"] is True
        assert body["delivery_errors"] == {"pushover": "socket closed"}

    def test_unexpected_exception(self, harness):
        harness.app.state.pipeline.process = Mock(side_effect=RuntimeError("boom"))
        response = harness.client.post("/ingest", json=PAYLOAD)

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "boom"}


# === Authorization ===

class TestAuth:
    """Tests for the shared-secret check."""

    @pytest.fixture
    def secured(self):
        return Harness(env={"GEMINI_API_KEY": "k", "HILLPULSE_SECRET": "s3cret"})

    def test_missing_header_rejected(self, secured):
        response = secured.client.post("/ingest", json=PAYLOAD)
        assert response.status_code == 401
        assert response.json() == {"ok": False, "error": "Unauthorized"}
        assert secured.provider.calls == []

    def test_wrong_secret_rejected(self, secured):
        response = secured.client.post("/ingest", json=PAYLOAD, headers={KEY_HEADER: "nope"})
        assert response.status_code == 401

    @pytest.mark.parametrize("headers", [
        {KEY_HEADER: "s3cret"},
        {"Authorization": "Bearer s3cret"},
        {"Authorization": "bearer s3cret"},
        {"Authorization": "s3cret"},
    ])
    def test_accepted_headers(self, secured, headers):
        response = secured.client.post("/ingest", json=PAYLOAD, headers=headers)
        assert response.status_code == 200

    def test_wrong_key_header_right_authorization(self, secured):
        response = secured.client.post(
            "/ingest",
            json=PAYLOAD,
            headers={KEY_HEADER: "nope", "Authorization": "Bearer s3cret"},
        )
        assert response.status_code == 200

    def test_open_when_no_secret(self, harness):
        response = harness.client.post("/ingest", json=PAYLOAD, headers={KEY_HEADER: "anything"})
        assert response.status_code == 200


@pytest.mark.parametrize("presented,expected", [
    ("s3cret", True),
    ("Bearer s3cret", True),
    ("  Bearer   s3cret  ", True),
    ("s3cret2", False),
    ("Bearer ", False),
    ("", False),
    (None, False),
])
def test_secret_matches(presented, expected):
    assert secret_matches("s3cret", presented) is expected
