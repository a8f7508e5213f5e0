"""Reasoning provider adapters behind the IModelProvider Protocol."""

from __future__ import annotations

from sleuth.core.config import LLMConfig
from sleuth.core.protocols import IModelProvider
from sleuth.model_providers.litellm_provider import LiteLLMProvider
from sleuth.model_providers.mock_provider import MockModelProvider


def create_model_provider(config: LLMConfig | None = None) -> IModelProvider:
    """Create the provider selected by ``config.provider``."""
    if config is None:
        config = LLMConfig()

    if config.provider == "litellm":
        return LiteLLMProvider(
            base_url=config.base_url,
            model=config.model,
            api_key=config.api_key,
            temperature=config.temperature,
            timeout=config.timeout,
        )
    return MockModelProvider()
