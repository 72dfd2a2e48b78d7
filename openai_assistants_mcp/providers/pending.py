"""Placeholder provider served while the registry is still initializing."""

from typing import Any, Dict

from ..errors import ProviderError
from .base import Provider, ProviderCapabilities, ProviderMetadata


class PendingProvider(Provider):
    """No-op provider: every entity call fails with a retryable ProviderError."""

    _METADATA = ProviderMetadata(
        name="pending",
        display_name="Pending provider",
        version="0.0.0",
        description="Stands in until the provider registry has finished initializing",
        capabilities=ProviderCapabilities(
            assistants=False,
            threads=False,
            messages=False,
            runs=False,
            run_steps=False,
            function_calling=False,
        ),
    )

    @property
    def metadata(self) -> ProviderMetadata:
        return self._METADATA

    async def validate_connection(self) -> bool:
        return False

    def _unavailable(self) -> ProviderError:
        return ProviderError(
            "Provider registry is still initializing; retry shortly",
            provider_name=self.name,
            category="provider_unavailable",
            retryable=True,
        )

    async def create_assistant(self, request: Dict[str, Any]) -> Dict[str, Any]:
        raise self._unavailable()

    async def list_assistants(self, params: Dict[str, Any]) -> Dict[str, Any]:
        raise self._unavailable()

    async def get_assistant(self, assistant_id: str) -> Dict[str, Any]:
        raise self._unavailable()

    async def update_assistant(self, assistant_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        raise self._unavailable()

    async def delete_assistant(self, assistant_id: str) -> Dict[str, Any]:
        raise self._unavailable()

    async def create_thread(self, request: Dict[str, Any]) -> Dict[str, Any]:
        raise self._unavailable()

    async def get_thread(self, thread_id: str) -> Dict[str, Any]:
        raise self._unavailable()

    async def update_thread(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        raise self._unavailable()

    async def delete_thread(self, thread_id: str) -> Dict[str, Any]:
        raise self._unavailable()

    async def create_message(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        raise self._unavailable()

    async def list_messages(self, thread_id: str, params: Dict[str, Any]) -> Dict[str, Any]:
        raise self._unavailable()

    async def get_message(self, thread_id: str, message_id: str) -> Dict[str, Any]:
        raise self._unavailable()

    async def update_message(self, thread_id: str, message_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        raise self._unavailable()

    async def delete_message(self, thread_id: str, message_id: str) -> Dict[str, Any]:
        raise self._unavailable()

    async def create_run(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        raise self._unavailable()

    async def list_runs(self, thread_id: str, params: Dict[str, Any]) -> Dict[str, Any]:
        raise self._unavailable()

    async def get_run(self, thread_id: str, run_id: str) -> Dict[str, Any]:
        raise self._unavailable()

    async def update_run(self, thread_id: str, run_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        raise self._unavailable()

    async def cancel_run(self, thread_id: str, run_id: str) -> Dict[str, Any]:
        raise self._unavailable()

    async def submit_tool_outputs(self, thread_id: str, run_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        raise self._unavailable()

    async def list_run_steps(self, thread_id: str, run_id: str, params: Dict[str, Any]) -> Dict[str, Any]:
        raise self._unavailable()

    async def get_run_step(self, thread_id: str, run_id: str, step_id: str) -> Dict[str, Any]:
        raise self._unavailable()
