"""
Provider registry: factory registration, provider initialization, health
tracking and per-request provider selection.
"""

import asyncio
import dataclasses
import logging
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Deque, Dict, List, Optional

from ..config import ProviderConfig, RegistryConfig
from ..errors import (
    DuplicateProviderError,
    NoProviderAvailableError,
    ProviderConfigError,
    ProviderInitError,
)
from .base import Provider, ProviderFactory
from .pending import PendingProvider

MAX_FALLBACK_EVENTS = 100


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


class RegistryState(str, Enum):
    PENDING = "pending"
    READY = "ready"


@dataclass(frozen=True)
class ProviderRegistration:
    """Registration information for an initialized provider."""

    provider: Provider
    config: ProviderConfig
    order: int
    health: HealthStatus = HealthStatus.UNKNOWN
    health_error: Optional[str] = None
    last_health_check: Optional[float] = None
    runtime: bool = False  # added via register_provider, not from configuration


@dataclass(frozen=True)
class FallbackEvent:
    """A provider hint that could not be honored."""

    requested: str
    selected: str
    reason: str
    timestamp: float


class ProviderRegistry:
    """
    Registry for assistants providers.

    Factories are registered up front; ``initialize()`` turns the enabled
    ``ProviderConfig`` entries into providers. Selection prefers the explicit
    default provider, then the lowest ``priority`` value, then registration
    order. Health is advisory unless ``health_policy`` is ``"hard"``.

    Registrations are never mutated in place: every change builds a new
    mapping and swaps it in, so a request that already picked a provider is
    unaffected by a concurrent re-initialization.
    """

    def __init__(self, config: Optional[RegistryConfig] = None):
        self.config = config or RegistryConfig()
        self.logger = logging.getLogger(__name__)
        self._factories: Dict[str, ProviderFactory] = {}
        self._registrations: Dict[str, ProviderRegistration] = {}
        self._init_failures: Dict[str, str] = {}
        self._fallback_events: Deque[FallbackEvent] = deque(maxlen=MAX_FALLBACK_EVENTS)
        self._lock = asyncio.Lock()
        self._state = RegistryState.PENDING
        self._sequence = 0
        self._pending_provider = PendingProvider()

    @property
    def state(self) -> RegistryState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is RegistryState.READY

    def register_factory(self, factory: ProviderFactory) -> None:
        """
        Register a provider factory.

        Args:
            factory: Factory whose ``name`` matches ``ProviderConfig.provider_name``

        Raises:
            DuplicateProviderError: If a factory with the same name exists
        """
        name = factory.name
        if name in self._factories:
            raise DuplicateProviderError(name)
        self._factories[name] = factory
        self.logger.debug(f"Registered provider factory '{name}'")

    def list_factories(self) -> List[str]:
        return list(self._factories)

    async def initialize(self) -> None:
        """
        (Re)build all enabled providers from configuration.

        Raises:
            ProviderInitError: If a required provider fails validation or creation.
                The previous registrations stay in place in that case.
        """
        async with self._lock:
            await self._initialize_locked()

    async def ensure_initialized(self) -> None:
        """Initialize once; concurrent callers wait for the first initialization."""
        if self.is_ready:
            return
        async with self._lock:
            if not self.is_ready:
                await self._initialize_locked()

    async def _initialize_locked(self) -> None:
        registrations: Dict[str, ProviderRegistration] = {}
        failures: Dict[str, str] = {}

        for provider_config in self.config.providers:
            name = provider_config.provider_name
            if not provider_config.enabled:
                self.logger.debug(f"Provider '{name}' is disabled, skipping")
                continue

            try:
                registration = await self._build_registration(provider_config)
            except Exception as e:
                if provider_config.required:
                    self.logger.error(f"Required provider '{name}' failed to initialize: {e}")
                    await self._close_all(registrations.values())
                    raise ProviderInitError(name, e) from e
                self.logger.warning(f"Optional provider '{name}' failed to initialize: {e}")
                failures[name] = str(e)
                continue

            registrations[name] = registration
            self.logger.info(f"Initialized provider '{name}'")

        # Providers added at runtime survive re-initialization unless configured again
        previous = self._registrations
        for name, registration in previous.items():
            if registration.runtime and name not in registrations:
                registrations[name] = registration

        self._registrations = registrations
        self._init_failures = failures
        self._state = RegistryState.READY

        for name, registration in previous.items():
            if registrations.get(name) is not registration:
                await registration.provider.close()

        self.logger.info(
            f"Provider registry ready with {len(registrations)} provider(s)"
            + (f", {len(failures)} optional failure(s)" if failures else "")
        )

    async def _build_registration(self, provider_config: ProviderConfig) -> ProviderRegistration:
        name = provider_config.provider_name
        factory = self._factories.get(name)
        if factory is None:
            raise ProviderConfigError(
                name, f"no factory registered (available: {', '.join(self._factories) or 'none'})"
            )

        factory.validate_config(provider_config)
        provider = factory.create(provider_config)
        self._sequence += 1
        registration = ProviderRegistration(provider=provider, config=provider_config, order=self._sequence)

        if self.config.health_check_on_startup:
            registration = await self._check_one(registration)
        return registration

    def register_provider(self, provider: Provider, config: Optional[ProviderConfig] = None) -> None:
        """
        Add or replace a provider at runtime, bypassing factory validation.

        Args:
            provider: Provider instance
            config: Optional configuration (priority etc.); defaults to one built
                from the provider's name
        """
        config = config or ProviderConfig(provider_name=provider.name)
        name = config.provider_name
        registrations = dict(self._registrations)
        if name in registrations:
            self.logger.warning(f"Provider '{name}' is already registered, replacing")

        self._sequence += 1
        registrations[name] = ProviderRegistration(
            provider=provider, config=config, order=self._sequence, runtime=True
        )
        self._registrations = registrations
        self.logger.debug(f"Registered provider '{name}' at runtime")

    def list_providers(self) -> List[str]:
        return list(self._registrations)

    def _is_selectable(self, registration: ProviderRegistration) -> bool:
        if self.config.health_policy == "hard":
            return registration.health is not HealthStatus.UNHEALTHY
        return True

    def get_default_provider(self) -> Provider:
        """
        Return the provider used when no (usable) hint is given.

        Returns:
            The configured default if usable, else the highest-priority provider,
            preferring ones not known to be unhealthy. While the registry is
            still pending and empty, a ``PendingProvider`` is returned.

        Raises:
            NoProviderAvailableError: If the registry is ready but nothing is selectable
        """
        registrations = self._registrations
        if not registrations:
            if self._state is RegistryState.PENDING:
                return self._pending_provider
            raise NoProviderAvailableError("No providers are registered")

        candidates = [r for r in registrations.values() if self._is_selectable(r)]
        if not candidates:
            raise NoProviderAvailableError("No healthy provider is available")

        preferred = registrations.get(self.config.default_provider or "")
        if preferred in candidates and preferred.health is not HealthStatus.UNHEALTHY:
            return preferred.provider

        if len(candidates) == 1:
            return candidates[0].provider

        ranked = sorted(
            candidates,
            key=lambda r: (
                r.health is HealthStatus.UNHEALTHY,
                r.config.priority if r.config.priority is not None else float("inf"),
                r.order,
            ),
        )
        return ranked[0].provider

    def select_provider(self, hint: Optional[str] = None) -> Provider:
        """
        Pick the provider for one request.

        Args:
            hint: Optional provider name requested by the caller

        Returns:
            The hinted provider when it is registered and healthy, otherwise the
            default provider. Falling back from a hint is recorded in diagnostics.
        """
        if not hint:
            return self.get_default_provider()

        registration = self._registrations.get(hint.strip().lower())
        if registration is None:
            reason = "unknown provider"
        elif registration.health is HealthStatus.UNHEALTHY:
            reason = f"provider unhealthy: {registration.health_error or 'health check failed'}"
        else:
            return registration.provider

        provider = self.get_default_provider()
        self._fallback_events.append(
            FallbackEvent(requested=hint, selected=provider.name, reason=reason, timestamp=time.time())
        )
        self.logger.warning(f"Provider hint '{hint}' not usable ({reason}), falling back to '{provider.name}'")
        return provider

    async def _check_one(self, registration: ProviderRegistration) -> ProviderRegistration:
        name = registration.config.provider_name
        error = None
        try:
            healthy = await asyncio.wait_for(
                registration.provider.validate_connection(), timeout=self.config.provider_timeout
            )
        except asyncio.TimeoutError:
            healthy = False
            error = f"health check timed out after {self.config.provider_timeout}s"
        except Exception as e:
            healthy = False
            error = str(e) or type(e).__name__

        if not healthy:
            error = error or "connection validation failed"
            self.logger.warning(f"Provider '{name}' is unhealthy: {error}")

        return dataclasses.replace(
            registration,
            health=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
            health_error=error,
            last_health_check=time.time(),
        )

    async def check_health(self) -> Dict[str, HealthStatus]:
        """
        Check every registered provider and record the results.

        Returns:
            Mapping of provider name to its new health status
        """
        current = self._registrations
        checked = await asyncio.gather(*(self._check_one(r) for r in current.values()))
        updated = dict(self._registrations)
        for registration in checked:
            name = registration.config.provider_name
            # Skip providers replaced while the check was running
            if updated.get(name) is current.get(name):
                updated[name] = registration
        self._registrations = updated
        return {name: r.health for name, r in updated.items()}

    def get_health(self) -> Dict[str, str]:
        health = {name: r.health.value for name, r in self._registrations.items()}
        for name in self._init_failures:
            health.setdefault(name, HealthStatus.UNHEALTHY.value)
        return health

    @property
    def fallback_events(self) -> List[FallbackEvent]:
        return list(self._fallback_events)

    def get_diagnostics(self) -> Dict[str, Any]:
        """Snapshot of registry state for server info and the CLI."""
        try:
            default = self.get_default_provider().name
        except NoProviderAvailableError:
            default = None

        return {
            "state": self._state.value,
            "health_policy": self.config.health_policy,
            "factories": self.list_factories(),
            "providers": {
                name: {
                    "display_name": r.provider.metadata.display_name,
                    "priority": r.config.priority,
                    "health": r.health.value,
                    "health_error": r.health_error,
                    "runtime": r.runtime,
                }
                for name, r in self._registrations.items()
            },
            "default_provider": default,
            "health": self.get_health(),
            "initialization_failures": dict(self._init_failures),
            "fallback_events": [dataclasses.asdict(e) for e in self._fallback_events],
        }

    async def _close_all(self, registrations) -> None:
        for registration in list(registrations):
            try:
                await registration.provider.close()
            except Exception as e:
                self.logger.warning(f"Failed to close provider '{registration.config.provider_name}': {e}")

    async def shutdown(self) -> None:
        """Close all providers and return to the pending state."""
        async with self._lock:
            registrations = self._registrations
            self._registrations = {}
            self._state = RegistryState.PENDING
            for registration in registrations.values():
                await registration.provider.close()
        self.logger.info("Provider registry shut down")
