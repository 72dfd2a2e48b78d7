"""Base class for tool handlers."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ...errors import ProviderError, ProviderTimeoutError
from ...providers.base import Provider


class BaseToolHandler(ABC):
    """
    One MCP tool: validates its arguments, then executes against a provider.

    Subclasses set ``name`` and ``category`` to match the tool table and
    implement ``validate`` and ``execute``.
    """

    name: str = ""
    category: str = ""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def validate(self, args: Dict[str, Any]) -> None:
        """Raise ``ValidationError`` if ``args`` are unusable."""

    @abstractmethod
    async def execute(self, args: Dict[str, Any], provider: Provider) -> Any:
        """Perform the provider call for already validated ``args``."""

    async def handle(self, args: Dict[str, Any], provider: Provider, timeout: Optional[float] = None) -> Any:
        """
        Validate and execute the tool call.

        Args:
            args: Tool arguments
            provider: Provider selected for this request
            timeout: Optional bound in seconds on the provider call

        Returns:
            The provider result

        Raises:
            ValidationError: Before any provider call, if arguments are invalid
            ProviderError: Enriched with this tool's name and category
        """
        self.validate(args)
        self.logger.debug(f"Executing {self.name} on provider '{provider.name}'")

        try:
            if timeout:
                return await asyncio.wait_for(self.execute(args, provider), timeout=timeout)
            return await self.execute(args, provider)
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(
                f"{self.name} timed out after {timeout}s",
                provider_name=provider.name,
                timeout=timeout,
            ).with_context(self.name, self.category) from e
        except ProviderError as e:
            raise e.with_context(self.name, self.category)

    @staticmethod
    def payload(args: Dict[str, Any], *routing_keys: str) -> Dict[str, Any]:
        """Request body: the arguments minus routing IDs and unset values."""
        return {k: v for k, v in args.items() if k not in routing_keys and v is not None}
