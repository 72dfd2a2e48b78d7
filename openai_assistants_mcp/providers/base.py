"""Provider interface and factory contract.

A provider exposes the assistants/threads/messages/runs/run-steps
operations of one backend. Tool handlers only ever talk to this interface;
the Provider Registry decides which concrete provider serves a request.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from ..config import ProviderConfig


@dataclass
class ProviderCapabilities:
    """Feature flags advertised by a provider."""

    assistants: bool = True
    threads: bool = True
    messages: bool = True
    runs: bool = True
    run_steps: bool = True
    function_calling: bool = True
    code_interpreter: bool = False
    file_search: bool = False
    streaming: bool = False
    max_context_length: Optional[int] = None
    supported_models: List[str] = field(default_factory=list)


@dataclass
class ProviderMetadata:
    """Descriptive information about a provider."""

    name: str
    display_name: str
    version: str
    description: str = ""
    capabilities: ProviderCapabilities = field(default_factory=ProviderCapabilities)
    documentation_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Provider(ABC):
    """Abstract assistants backend.

    Every entity operation is a coroutine returning the backend's JSON
    object (a dict). Failures are raised as ``ProviderError``.
    """

    @property
    @abstractmethod
    def metadata(self) -> ProviderMetadata:
        """Provider metadata."""

    @property
    def name(self) -> str:
        return self.metadata.name

    @abstractmethod
    async def validate_connection(self) -> bool:
        """Return True if the backend is reachable with the configured credentials."""

    async def close(self) -> None:
        """Release resources held by the provider."""

    # Assistants
    @abstractmethod
    async def create_assistant(self, request: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def list_assistants(self, params: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def get_assistant(self, assistant_id: str) -> Dict[str, Any]: ...

    @abstractmethod
    async def update_assistant(self, assistant_id: str, request: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def delete_assistant(self, assistant_id: str) -> Dict[str, Any]: ...

    # Threads
    @abstractmethod
    async def create_thread(self, request: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def get_thread(self, thread_id: str) -> Dict[str, Any]: ...

    @abstractmethod
    async def update_thread(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def delete_thread(self, thread_id: str) -> Dict[str, Any]: ...

    # Messages
    @abstractmethod
    async def create_message(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def list_messages(self, thread_id: str, params: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def get_message(self, thread_id: str, message_id: str) -> Dict[str, Any]: ...

    @abstractmethod
    async def update_message(
        self, thread_id: str, message_id: str, request: Dict[str, Any]
    ) -> Dict[str, Any]: ...

    @abstractmethod
    async def delete_message(self, thread_id: str, message_id: str) -> Dict[str, Any]: ...

    # Runs
    @abstractmethod
    async def create_run(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def list_runs(self, thread_id: str, params: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def get_run(self, thread_id: str, run_id: str) -> Dict[str, Any]: ...

    @abstractmethod
    async def update_run(self, thread_id: str, run_id: str, request: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def cancel_run(self, thread_id: str, run_id: str) -> Dict[str, Any]: ...

    @abstractmethod
    async def submit_tool_outputs(
        self, thread_id: str, run_id: str, request: Dict[str, Any]
    ) -> Dict[str, Any]: ...

    # Run steps
    @abstractmethod
    async def list_run_steps(self, thread_id: str, run_id: str, params: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def get_run_step(self, thread_id: str, run_id: str, step_id: str) -> Dict[str, Any]: ...


class ProviderFactory(ABC):
    """Validates provider configuration and builds provider instances."""

    @property
    @abstractmethod
    def metadata(self) -> ProviderMetadata:
        """Metadata of the providers this factory builds."""

    @property
    def name(self) -> str:
        return self.metadata.name

    @abstractmethod
    def validate_config(self, config: ProviderConfig) -> None:
        """Raise ``ProviderConfigError`` if ``config`` cannot produce a working provider."""

    @abstractmethod
    def create(self, config: ProviderConfig) -> Provider:
        """Build a provider from an already validated configuration."""
