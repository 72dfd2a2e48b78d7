"""Assistants backend providers and the provider registry."""

from typing import Optional

from ..config import RegistryConfig
from .base import Provider, ProviderFactory, ProviderMetadata, ProviderCapabilities
from .openai import OpenAIProvider, OpenAIProviderFactory
from .pending import PendingProvider
from .registry import HealthStatus, ProviderRegistry, RegistryState


def create_provider_registry(config: Optional[RegistryConfig] = None) -> ProviderRegistry:
    """Create a registry with the built-in provider factories registered."""
    registry = ProviderRegistry(config)
    registry.register_factory(OpenAIProviderFactory())
    return registry


__all__ = [
    "Provider",
    "ProviderFactory",
    "ProviderMetadata",
    "ProviderCapabilities",
    "OpenAIProvider",
    "OpenAIProviderFactory",
    "PendingProvider",
    "HealthStatus",
    "ProviderRegistry",
    "RegistryState",
    "create_provider_registry",
]
