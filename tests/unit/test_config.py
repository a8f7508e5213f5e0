"""Tests for configuration defaults and env overrides."""

from __future__ import annotations

from sleuth.core.config import AppSettings, CacheConfig, LLMConfig, RedactionConfig


def test_default_settings():
    settings = AppSettings()
    assert settings.environment == "dev"
    assert settings.llm.provider == "mock"
    assert settings.cache.backend == "memory"
    assert settings.include_raw_output is True


def test_llm_config_defaults():
    config = LLMConfig()
    assert config.provider == "mock"
    assert config.temperature == 0.0


def test_documented_thresholds():
    settings = AppSettings()
    assert settings.fingerprint.sample_size == 10
    assert RedactionConfig().log_max_length == 200
    assert RedactionConfig().details_max_length == 500
    assert settings.response.default_retry_after == 60
    assert CacheConfig().ttl_seconds == 86400


def test_prod_hides_raw_output():
    assert AppSettings(environment="prod").include_raw_output is False


def test_env_override(monkeypatch):
    monkeypatch.setenv("SLEUTH_CACHE_TTL_SECONDS", "120")
    monkeypatch.setenv("SLEUTH_CACHE_BACKEND", "redis")
    config = CacheConfig()
    assert config.ttl_seconds == 120
    assert config.backend == "redis"
