"""HTTP-level tests for the FastAPI app using TestClient."""

from __future__ import annotations

import json
import logging

import pytest
from fastapi.testclient import TestClient

from sleuth.analysis.redaction import TRUNCATION_MARKER
from sleuth.api.app import create_app
from sleuth.core.config import (
    AdminConfig,
    AppSettings,
    RateLimitConfig,
    RedactionConfig,
    RequestConfig,
)
from sleuth.core.exceptions import ModelProviderError
from tests.fakes import MemoryCacheBackend, MockModelProvider

LLM_OUTPUT = json.dumps({"errors": [{"message": "Unexpected token at line 4"}]})


def _client(settings=None, model=None, **kwargs):
    app = create_app(
        settings or AppSettings(),
        cache_backend=MemoryCacheBackend(),
        model_provider=model or MockModelProvider(default_response=LLM_OUTPUT),
    )
    return TestClient(app, **kwargs)


@pytest.fixture
def client():
    return _client()


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy"}

    def test_ready(self, client):
        body = client.get("/ready").json()
        assert body["status"] == "ready"
        assert body["cache"] is True
        assert body["agent"]["llm_provider"] == "mock"


class TestAnalyze:
    def test_success(self, client):
        resp = client.post(
            "/analyze", json={"content": '{"a": 1}'}, headers={"X-Request-ID": "abc-123"},
        )
        assert resp.status_code == 200
        assert resp.headers["X-Request-ID"] == "abc-123"
        body = resp.json()
        assert body["status"] == "ok"
        assert body["request_id"] == "abc-123"
        assert body["errors"][0] == {
            "id": "err-1",
            "type": "syntax",
            "severity": "high",
            "message": "Unexpected token at line 4",
            "line": 4,
            "suggestions": [],
        }

    def test_cache_hit_header(self, client):
        client.post("/analyze", json={"content": "a,b,c\n1,2,3\n"})
        resp = client.post("/analyze", json={"content": "a,b,c\n1,2,3\n"})
        assert resp.headers["X-Cache-Status"] == "HIT"
        assert resp.json()["cached"] is True

    def test_missing_content(self, client):
        resp = client.post("/analyze", json={"file_type": "json"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["status"] == "error"
        assert body["error_type"] == "validation_error"
        assert body["message"] == "Missing required field: content"
        assert body["fix"]

    def test_invalid_file_type(self, client):
        resp = client.post("/analyze", json={"content": "x", "file_type": "ini"})
        assert resp.status_code == 400
        assert "ini" in resp.json()["message"]

    def test_wrong_content_type(self, client):
        resp = client.post("/analyze", content="hello", headers={"Content-Type": "text/plain"})
        assert resp.status_code == 415

    def test_malformed_json_body(self, client):
        resp = client.post(
            "/analyze", content="{not json", headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400

    def test_request_too_large(self):
        client = _client(AppSettings(request=RequestConfig(max_request_size_mb=0.0001)))
        resp = client.post("/analyze", json={"content": "x" * 500})
        assert resp.status_code == 413

    def test_rate_limited(self):
        client = _client(AppSettings(rate_limit=RateLimitConfig(requests_per_window=1)))
        client.post("/analyze", json={"content": "{}"})
        resp = client.post("/analyze", json={"content": "{}"})
        assert resp.status_code == 429
        body = resp.json()
        assert body["error_type"] == "rate_limit_exceeded"
        assert resp.headers["Retry-After"] == str(body["retry_after"])

    def test_provider_failure(self):
        class FailingProvider(MockModelProvider):
            def chat(self, messages, **kwargs):
                raise ModelProviderError("Provider returned HTTP 503")

        resp = _client(model=FailingProvider()).post("/analyze", json={"content": "{}"})
        assert resp.status_code == 502
        assert resp.json()["error_type"] == "llm_provider_error"

    def test_deeply_nested_content_is_analyzed(self, client):
        resp = client.post("/analyze", json={"content": "[" * 20_000, "file_type": "json"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["parser_hints"][0]["message"].startswith("JSON parse error")

    def test_loosely_typed_provider_fields_are_tolerated(self):
        output = '{"errors": [{"message": "bad", "suggestions": true, "line": 1e999, "confidence": 1e999}]}'
        client = _client(model=MockModelProvider(default_response=output))
        resp = client.post("/analyze", json={"content": "{}"})
        assert resp.status_code == 200
        [error] = resp.json()["errors"]
        assert [s["text"] for s in error["suggestions"]] == ["True"]
        assert "line" not in error
        assert "confidence" not in error


class TestRedactionLengths:
    SETTINGS = AppSettings(redaction=RedactionConfig(log_max_length=20, details_max_length=30))

    def test_error_log_line_uses_configured_length(self, caplog):
        client = _client(self.SETTINGS)
        with caplog.at_level(logging.WARNING, logger="sleuth.api.responses"):
            resp = client.post("/analyze", json={"content": "x", "file_type": "z" * 300})
        assert resp.status_code == 400
        [line] = [r.getMessage() for r in caplog.records if r.name == "sleuth.api.responses"]
        assert line.endswith(TRUNCATION_MARKER)
        assert "zz" not in line

    def test_unexpected_error_uses_configured_lengths(self, caplog):
        class BrokenProvider(MockModelProvider):
            def chat(self, messages, **kwargs):
                raise RuntimeError("x " * 200)

        client = _client(self.SETTINGS, model=BrokenProvider(), raise_server_exceptions=False)
        with caplog.at_level(logging.ERROR, logger="sleuth.api.app"):
            resp = client.post("/analyze", json={"content": "{}"})
        assert resp.status_code == 500
        details = resp.json()["details"]
        assert details == "RuntimeError: " + "x " * 8 + TRUNCATION_MARKER

        [line] = [
            r.getMessage() for r in caplog.records
            if r.name == "sleuth.api.app" and r.levelno == logging.ERROR
        ]
        assert line.endswith("x " * 10 + TRUNCATION_MARKER)
        assert "x " * 11 not in line


class TestAdmin:
    def test_invalidate_file_type(self, client):
        client.post("/analyze", json={"content": "a,b,c\n1,2,3\n", "file_type": "csv"})
        resp = client.post("/admin/cache/invalidate", json={"scope": "file_type", "file_type": "csv"})
        assert resp.status_code == 200
        assert resp.json()["deleted_entries"] == 1
        assert "X-Request-ID" in resp.headers

    def test_invalid_file_type(self, client):
        resp = client.post("/admin/cache/invalidate", json={"scope": "file_type", "file_type": "ini"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid file_type: ini"

    def test_version_bump_forces_miss(self, client):
        client.post("/analyze", json={"content": "{}"})
        client.post("/admin/cache/invalidate", json={"scope": "version", "type": "rag", "version": "2.0.0"})
        resp = client.post("/analyze", json={"content": "{}"})
        assert resp.json()["cached"] is False

    def test_stats(self, client):
        client.post("/analyze", json={"content": "{}"})
        client.post("/analyze", json={"content": "{}"})
        body = client.get("/admin/cache/stats").json()
        assert body["cache_enabled"] is True
        assert body["stats"]["hits"] == 1
        assert body["stats"]["hit_rate_percentage"] == "50.00%"
        assert body["storage"]["backend"] == "memory"
        assert set(body["versions"]) == {"model_version", "rag_version"}

    def test_requires_key_when_configured(self):
        client = _client(AppSettings(admin=AdminConfig(api_key="s3cret")))
        resp = client.post("/admin/cache/invalidate", json={"scope": "all"})
        assert resp.status_code == 401
        assert resp.json()["error_type"] == "unauthorized"

        ok = client.post(
            "/admin/cache/invalidate", json={"scope": "all"}, headers={"X-API-Key": "s3cret"},
        )
        assert ok.status_code == 200
        bearer = client.get("/admin/cache/stats", headers={"Authorization": "Bearer s3cret"})
        assert bearer.status_code == 200
