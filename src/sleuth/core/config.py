"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class FingerprintConfig(BaseSettings):
    """Schema fingerprint sampling."""

    model_config = {"env_prefix": "SLEUTH_FINGERPRINT_"}

    sample_size: int = 10


class RedactionConfig(BaseSettings):
    """Length caps applied after pattern redaction."""

    model_config = {"env_prefix": "SLEUTH_REDACTION_"}

    log_max_length: int = 200
    details_max_length: int = 500


class ResponseConfig(BaseSettings):
    """Response construction defaults."""

    model_config = {"env_prefix": "SLEUTH_RESPONSE_"}

    default_retry_after: int = 60  # seconds


class LLMConfig(BaseSettings):
    """Reasoning provider configuration."""

    model_config = {"env_prefix": "SLEUTH_LLM_"}

    provider: Literal["mock", "litellm"] = "mock"
    base_url: str = "http://litellm-proxy:4000/v1"
    model: str = "llama-3.1-8b-instant"
    api_key: str | None = None
    temperature: float = 0.0
    timeout: float = 30.0


class RedisConfig(BaseSettings):
    """Redis cache configuration."""

    model_config = {"env_prefix": "SLEUTH_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0


class CacheConfig(BaseSettings):
    """Analysis result cache."""

    model_config = {"env_prefix": "SLEUTH_CACHE_"}

    enabled: bool = True
    backend: Literal["memory", "redis"] = "memory"
    ttl_seconds: int = 86400  # 24 hours
    key_prefix: str = "sleuth:cache:"
    model_version: str = "llama-3.1-8b-instant-v1"
    rag_version: str = "1.0.0"  # bump when grounding content changes


class AdminConfig(BaseSettings):
    """Administrative endpoint credentials."""

    model_config = {"env_prefix": "SLEUTH_ADMIN_"}

    api_key: str | None = None  # unset leaves admin endpoints open


class RateLimitConfig(BaseSettings):
    """Fixed-window request throttling per client."""

    model_config = {"env_prefix": "SLEUTH_RATE_LIMIT_"}

    enabled: bool = True
    requests_per_window: int = 20
    window_seconds: int = 60


class RequestConfig(BaseSettings):
    """Inbound request limits."""

    model_config = {"env_prefix": "SLEUTH_REQUEST_"}

    max_request_size_mb: float = 1.0
    max_tokens_per_request: int = 100_000
    max_content_chars: int = 50_000
    default_max_errors: int = 100


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "SLEUTH_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    fingerprint: FingerprintConfig = FingerprintConfig()
    redaction: RedactionConfig = RedactionConfig()
    response: ResponseConfig = ResponseConfig()
    llm: LLMConfig = LLMConfig()
    redis: RedisConfig = RedisConfig()
    cache: CacheConfig = CacheConfig()
    admin: AdminConfig = AdminConfig()
    rate_limit: RateLimitConfig = RateLimitConfig()
    request: RequestConfig = RequestConfig()

    @property
    def include_raw_output(self) -> bool:
        """Raw upstream output is only echoed back outside production."""
        return self.environment != "prod"
