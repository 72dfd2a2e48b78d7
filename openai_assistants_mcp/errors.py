"""Exception hierarchy for the OpenAI Assistants MCP server.

Components raise these typed errors; only the protocol dispatcher turns
them into JSON-RPC error objects.
"""

from typing import Any, Dict, List, Optional


class AssistantsMCPError(Exception):
    """Base class for all errors raised by this package."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AssistantsMCPError):
    """Tool arguments failed validation before reaching a provider."""

    def __init__(self, tool_name: str, message: str, parameter: Optional[str] = None):
        super().__init__(message)
        self.tool_name = tool_name
        self.parameter = parameter

    def __str__(self):
        if self.parameter:
            return f"{self.message} (tool: {self.tool_name}, parameter: {self.parameter})"
        return f"{self.message} (tool: {self.tool_name})"


class InvalidRequestError(AssistantsMCPError):
    """The message is not a valid JSON-RPC 2.0 request."""


class MethodNotFoundError(AssistantsMCPError):
    """The JSON-RPC method is not supported."""

    def __init__(self, method: str):
        super().__init__(f"Method not found: {method}")
        self.method = method


class InvalidParamsError(AssistantsMCPError):
    """Protocol-level parameters are missing or malformed."""


class UnknownToolError(AssistantsMCPError):
    """No handler is registered under the requested tool name."""

    def __init__(self, tool_name: str, available_tools: Optional[List[str]] = None):
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name
        self.available_tools = list(available_tools or [])


class ResourceNotFoundError(AssistantsMCPError):
    """The requested URI is not in the resource catalog."""

    def __init__(self, uri: str, available_resources: Optional[List[str]] = None):
        super().__init__(f"Resource not found: {uri}")
        self.uri = uri
        self.available_resources = list(available_resources or [])


class ResourceContentError(AssistantsMCPError):
    """A catalogued resource resolved to empty or missing content."""

    def __init__(self, uri: str, reason: str = "resource content is empty"):
        super().__init__(f"Resource {uri} could not be resolved: {reason}")
        self.uri = uri


class PromptNotFoundError(AssistantsMCPError):
    """No prompt template is registered under the requested name."""

    def __init__(self, prompt_name: str, available_prompts: Optional[List[str]] = None):
        super().__init__(f"Prompt not found: {prompt_name}")
        self.prompt_name = prompt_name
        self.available_prompts = list(available_prompts or [])


class PromptArgumentError(InvalidParamsError):
    """Prompt arguments are missing, unknown or not strings."""

    def __init__(self, prompt_name: str, problems: List[str], missing: Optional[List[str]] = None):
        super().__init__(f"Invalid arguments for prompt '{prompt_name}': {', '.join(problems)}")
        self.prompt_name = prompt_name
        self.problems = list(problems)
        self.missing = list(missing or [])


class ProviderError(AssistantsMCPError):
    """A provider call failed.

    Carries the backend status and a coarse category so callers can decide
    whether to retry. Handlers enrich the error with the tool context via
    ``with_context`` before re-raising.
    """

    def __init__(
        self,
        message: str,
        provider_name: Optional[str] = None,
        status_code: Optional[int] = None,
        category: Optional[str] = None,
        retryable: bool = False,
        retry_after: Optional[str] = None,
        documentation: Optional[str] = None,
        response_data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.provider_name = provider_name
        self.status_code = status_code
        self.category = category
        self.retryable = retryable
        self.retry_after = retry_after
        self.documentation = documentation
        self.response_data = response_data
        self.tool_name: Optional[str] = None
        self.tool_category: Optional[str] = None

    def with_context(self, tool_name: str, tool_category: str) -> "ProviderError":
        """Attach the originating tool and category, keeping any earlier context."""
        self.tool_name = self.tool_name or tool_name
        self.tool_category = self.tool_category or tool_category
        return self

    def __str__(self):
        parts = [self.message]
        if self.provider_name:
            parts.append(f"Provider: {self.provider_name}")
        if self.status_code:
            parts.append(f"Status: {self.status_code}")
        if self.tool_name:
            parts.append(f"Tool: {self.tool_name}")
        return " | ".join(parts)


class ProviderTimeoutError(ProviderError):
    """A provider call did not complete within the configured timeout."""

    def __init__(self, message: str, provider_name: Optional[str] = None, timeout: Optional[float] = None):
        super().__init__(
            message,
            provider_name=provider_name,
            category="timeout",
            retryable=True,
        )
        self.timeout = timeout


class NoProviderAvailableError(ProviderError):
    """The registry is ready but holds no selectable provider."""

    def __init__(self, message: str = "No provider is available"):
        super().__init__(message, category="provider_unavailable", retryable=False)


class ProviderConfigError(AssistantsMCPError):
    """A provider factory rejected its configuration."""

    def __init__(self, provider_name: str, message: str):
        super().__init__(f"Invalid configuration for provider '{provider_name}': {message}")
        self.provider_name = provider_name


class ProviderInitError(AssistantsMCPError):
    """A required provider could not be initialized."""

    def __init__(self, provider_name: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to initialize provider '{provider_name}'{detail}")
        self.provider_name = provider_name
        self.cause = cause


class RegistrationError(AssistantsMCPError):
    """A registry was built from an inconsistent table."""


class DuplicateProviderError(RegistrationError):
    """A provider factory name was registered twice."""

    def __init__(self, provider_name: str):
        super().__init__(f"Provider factory '{provider_name}' is already registered")
        self.provider_name = provider_name


class NotInitializedError(AssistantsMCPError):
    """A request other than initialize arrived before the handshake."""

    def __init__(self, method: str):
        super().__init__(f"Server not initialized: '{method}' received before 'initialize'")
        self.method = method
