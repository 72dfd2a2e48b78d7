"""
MCP protocol dispatcher.

BaseMCPHandler accepts decoded JSON-RPC 2.0 messages, enforces the
initialize handshake, routes methods, and is the only place where internal
errors are converted into JSON-RPC error objects.
"""

import json
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
)

from ..config import AppConfig
from ..errors import (
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    NotInitializedError,
    ProviderError,
    ProviderInitError,
    PromptArgumentError,
    PromptNotFoundError,
    ResourceContentError,
    ResourceNotFoundError,
    UnknownToolError,
    ValidationError,
)
from ..providers import ProviderRegistry, create_provider_registry
from ..utils.request_context import generate_request_id, set_request_id
from .completion import Completer
from .handlers.registry import ToolHandlerRegistry
from .prompts.catalog import PromptCatalog
from .resources.catalog import ResourceCatalog
from .utils.errors import sanitize_error
from .utils.pagination import paginate, with_next_cursor
from .utils.serialization import safe_json_dumps

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"

MethodHandler = Callable[[Dict[str, Any]], Awaitable[Any]]


class ConnectionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    SERVING = "serving"


class BaseMCPHandler:
    """
    JSON-RPC dispatcher for the assistants MCP server.

    Two ways to construct it:

    - ``BaseMCPHandler(config)`` returns immediately with the provider
      registry pending. The ``initialize`` handshake (or the first request in
      lazy mode) initializes it. A tool call routed while the registry is
      pending, for example after ``shutdown()``, gets a retryable provider
      error.
    - ``await BaseMCPHandler.create(config)`` initializes the provider
      registry first and raises ``ProviderInitError`` instead of returning a
      handler that cannot serve.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        provider_registry: Optional[ProviderRegistry] = None,
        tool_registry: Optional[ToolHandlerRegistry] = None,
        resource_catalog: Optional[ResourceCatalog] = None,
        prompt_catalog: Optional[PromptCatalog] = None,
    ):
        self.config = config or AppConfig()
        self.provider_registry = provider_registry or create_provider_registry(self.config.registry)
        self.tool_registry = tool_registry or ToolHandlerRegistry()
        self.resource_catalog = resource_catalog or ResourceCatalog()
        self.prompt_catalog = prompt_catalog or PromptCatalog()
        self.completer = Completer(self.prompt_catalog, self.resource_catalog)
        self.state = ConnectionState.UNINITIALIZED
        self.client_info: Optional[Dict[str, Any]] = None

        self._methods: Dict[str, MethodHandler] = {
            "initialize": self._handle_initialize,
            "ping": self._handle_ping,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
            "resources/list": self._handle_resources_list,
            "resources/read": self._handle_resources_read,
            "prompts/list": self._handle_prompts_list,
            "prompts/get": self._handle_prompts_get,
            "completion/complete": self._handle_completion_complete,
        }
        self._notifications: Dict[str, MethodHandler] = {
            "notifications/initialized": self._handle_initialized_notification,
        }

    @classmethod
    async def create(
        cls,
        config: Optional[AppConfig] = None,
        provider_registry: Optional[ProviderRegistry] = None,
    ) -> "BaseMCPHandler":
        """Build a handler whose provider registry is fully initialized."""
        handler = cls(config, provider_registry)
        await handler.initialize_providers()
        return handler

    async def initialize_providers(self) -> None:
        await self.provider_registry.ensure_initialized()

    async def shutdown(self) -> None:
        await self.provider_registry.shutdown()

    # Entry points

    async def handle_raw(self, payload: Union[str, bytes]) -> Optional[str]:
        """
        Handle one serialized JSON-RPC message (single request or batch).

        Returns:
            Serialized response, or None when nothing must be sent back
        """
        try:
            message = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Discarding unparseable message: {e}")
            return json.dumps(self._error_response(None, PARSE_ERROR, f"Parse error: {e}"))
        except RecursionError:
            logger.warning("Discarding message nested too deeply to decode")
            return json.dumps(self._error_response(None, PARSE_ERROR, "Parse error: message is nested too deeply"))

        try:
            response = await self.handle_message(message)
            if response is None:
                return None
            return safe_json_dumps(response)
        except Exception as e:
            logger.exception(f"Unhandled error while handling message: {e}")
            return json.dumps(self.internal_error_response(e))

    def internal_error_response(self, error: Exception, request_id: Any = None) -> Dict[str, Any]:
        """Error envelope for a failure that escaped request handling."""
        return self._error_response(request_id, INTERNAL_ERROR, f"Internal error: {sanitize_error(error)}")

    async def handle_message(self, message: Any) -> Optional[Union[Dict[str, Any], List[Dict[str, Any]]]]:
        """Handle a decoded message; batches are processed in order."""
        if isinstance(message, list):
            if not message:
                return self._error_response(None, INVALID_REQUEST, "Invalid Request: empty batch")
            responses = []
            for item in message:
                response = await self.handle_request(item)
                if response is not None:
                    responses.append(response)
            return responses or None
        return await self.handle_request(message)

    async def handle_request(self, request: Any) -> Optional[Dict[str, Any]]:
        """
        Handle one decoded JSON-RPC request or notification.

        Returns:
            The response envelope, or None for notifications
        """
        set_request_id(generate_request_id())

        try:
            self._validate_envelope(request)
        except InvalidRequestError as e:
            request_id = request.get("id") if isinstance(request, dict) else None
            if not isinstance(request_id, (str, int)) or isinstance(request_id, bool):
                request_id = None
            return self._error_response(request_id, INVALID_REQUEST, f"Invalid Request: {e.message}")

        method = request["method"]
        is_notification = "id" not in request
        request_id = request.get("id")
        params = request.get("params")
        if params is None:
            params = {}

        logger.debug(f"Handling {'notification' if is_notification else 'request'} {method}")

        try:
            if not isinstance(params, dict):
                raise InvalidParamsError("params must be an object")
            result = await self._dispatch(method, params, is_notification)
        except Exception as e:
            if is_notification:
                logger.warning(f"Notification {method} failed: {e}")
                return None
            error = self._error_object(e)
            return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}

        if is_notification:
            return None
        return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}

    @staticmethod
    def _validate_envelope(request: Any) -> None:
        if not isinstance(request, dict):
            raise InvalidRequestError("request must be an object")
        if request.get("jsonrpc") != JSONRPC_VERSION:
            raise InvalidRequestError("jsonrpc must be '2.0'")
        if not isinstance(request.get("method"), str) or not request["method"]:
            raise InvalidRequestError("method must be a non-empty string")
        if "id" in request:
            request_id = request["id"]
            if request_id is not None and (isinstance(request_id, bool) or not isinstance(request_id, (str, int))):
                raise InvalidRequestError("id must be a string, an integer or null")

    async def _dispatch(self, method: str, params: Dict[str, Any], is_notification: bool) -> Any:
        if is_notification and method in self._notifications:
            return await self._notifications[method](params)

        handler = self._methods.get(method)
        if handler is None:
            if is_notification:
                logger.debug(f"Ignoring unsupported notification {method}")
                return None
            raise MethodNotFoundError(method)

        if method not in ("initialize", "ping") and self.state is ConnectionState.UNINITIALIZED:
            if not self.config.server.lazy_initialize:
                raise NotInitializedError(method)
            logger.warning(f"'{method}' received before 'initialize', initializing implicitly")
            await self.initialize_providers()
            self.state = ConnectionState.INITIALIZED

        result = await handler(params)

        if method != "initialize" and self.state is ConnectionState.INITIALIZED:
            self.state = ConnectionState.SERVING
        return result

    # Methods

    async def _handle_initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        self.client_info = params.get("clientInfo")
        requested = params.get("protocolVersion")
        if requested and requested != self.config.server.protocol_version:
            logger.info(
                f"Client requested protocol {requested}, answering with {self.config.server.protocol_version}"
            )
        if self.state is not ConnectionState.UNINITIALIZED:
            logger.debug("Re-initializing connection")

        await self.initialize_providers()
        self.state = ConnectionState.INITIALIZED
        return {
            "protocolVersion": self.config.server.protocol_version,
            "capabilities": {
                "tools": {"listChanged": False},
                "resources": {"subscribe": False, "listChanged": False},
                "prompts": {"listChanged": False},
                "completions": {},
            },
            "serverInfo": {
                "name": self.config.server.name,
                "version": self.config.server.version,
            },
        }

    async def _handle_initialized_notification(self, params: Dict[str, Any]) -> None:
        if self.state is ConnectionState.UNINITIALIZED:
            logger.warning("Received notifications/initialized before initialize")
            return None
        self.state = ConnectionState.SERVING
        return None

    async def _handle_ping(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    async def _handle_tools_list(self, params: Dict[str, Any]) -> Dict[str, Any]:
        tools, next_cursor = paginate(
            self.tool_registry.list_tools(), params.get("cursor"), self.config.server.page_size
        )
        return with_next_cursor(
            {"tools": [tool.model_dump(by_alias=True, exclude_none=True) for tool in tools]}, next_cursor
        )

    async def _handle_tools_call(self, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("tools/call requires a string 'name'")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("tools/call 'arguments' must be an object")

        if not self.tool_registry.has_tool(name):
            raise UnknownToolError(name, self.tool_registry.list_tool_names())

        meta = params.get("_meta")
        hint = meta.get("provider") if isinstance(meta, dict) else None
        provider = self.provider_registry.select_provider(hint if isinstance(hint, str) else None)

        logger.info(f"tools/call {name} via provider '{provider.name}'")
        result = await self.tool_registry.dispatch(
            name, arguments, provider, timeout=self.config.registry.provider_timeout
        )
        return {"content": [{"type": "text", "text": safe_json_dumps(result, indent=2)}]}

    async def _handle_resources_list(self, params: Dict[str, Any]) -> Dict[str, Any]:
        entries, next_cursor = paginate(
            self.resource_catalog.list_resources(), params.get("cursor"), self.config.server.page_size
        )
        return with_next_cursor({"resources": [entry.to_dict() for entry in entries]}, next_cursor)

    async def _handle_resources_read(self, params: Dict[str, Any]) -> Dict[str, Any]:
        uri = params.get("uri")
        if not isinstance(uri, str) or not uri:
            raise InvalidParamsError("resources/read requires a string 'uri'")
        contents = self.resource_catalog.read_resource(uri)
        return {"contents": [contents.to_dict()]}

    async def _handle_prompts_list(self, params: Dict[str, Any]) -> Dict[str, Any]:
        entries, next_cursor = paginate(
            self.prompt_catalog.list_prompts(), params.get("cursor"), self.config.server.page_size
        )
        return with_next_cursor(
            {"prompts": [entry.to_mcp().model_dump(by_alias=True, exclude_none=True) for entry in entries]},
            next_cursor,
        )

    async def _handle_prompts_get(self, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("prompts/get requires a string 'name'")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("prompts/get 'arguments' must be an object")

        result = self.prompt_catalog.get_prompt(name, arguments)
        return result.model_dump(by_alias=True, exclude_none=True)

    async def _handle_completion_complete(self, params: Dict[str, Any]) -> Dict[str, Any]:
        ref = params.get("ref")
        argument = params.get("argument")
        if not isinstance(ref, dict) or not isinstance(argument, dict):
            raise InvalidParamsError("completion/complete requires 'ref' and 'argument' objects")
        return self.completer.complete(ref, argument).model_dump(by_alias=True, exclude_none=True)

    # Error translation

    @staticmethod
    def _error_response(request_id: Any, code: int, message: str) -> Dict[str, Any]:
        return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": {"code": code, "message": message}}

    def _error_object(self, error: Exception) -> Dict[str, Any]:
        """Convert an exception into a JSON-RPC error object."""
        if isinstance(error, ValidationError):
            code, data = INVALID_PARAMS, {
                "category": "validation",
                "toolName": error.tool_name,
                "parameter": error.parameter,
            }
        elif isinstance(error, UnknownToolError):
            code, data = METHOD_NOT_FOUND, {
                "category": "not_found",
                "toolName": error.tool_name,
                "availableTools": error.available_tools,
            }
        elif isinstance(error, MethodNotFoundError):
            code, data = METHOD_NOT_FOUND, {"method": error.method}
        elif isinstance(error, ResourceNotFoundError):
            code, data = INVALID_PARAMS, {
                "category": "resource",
                "uri": error.uri,
                "availableResources": error.available_resources,
            }
        elif isinstance(error, PromptNotFoundError):
            code, data = INVALID_PARAMS, {
                "category": "prompt",
                "promptName": error.prompt_name,
                "availablePrompts": error.available_prompts,
            }
        elif isinstance(error, PromptArgumentError):
            code, data = INVALID_PARAMS, {
                "category": "validation",
                "promptName": error.prompt_name,
                "missing": error.missing or None,
            }
        elif isinstance(error, ResourceContentError):
            code, data = INTERNAL_ERROR, {"category": "resource", "uri": error.uri}
        elif isinstance(error, ProviderError):
            code = INVALID_PARAMS if error.status_code in (404, 429) else INTERNAL_ERROR
            data = {
                "provider": error.provider_name,
                "status": error.status_code,
                "category": error.category,
                "retryable": error.retryable,
                "retryAfter": error.retry_after,
                "documentation": error.documentation,
                "toolName": error.tool_name,
                "toolCategory": error.tool_category,
            }
        elif isinstance(error, ProviderInitError):
            code, data = INTERNAL_ERROR, {"category": "provider_init", "provider": error.provider_name}
        elif isinstance(error, NotInitializedError):
            code, data = INVALID_REQUEST, {"method": error.method}
        elif isinstance(error, InvalidParamsError):
            code, data = INVALID_PARAMS, {}
        else:
            logger.exception(f"Unhandled error while serving request: {error}")
            return {"code": INTERNAL_ERROR, "message": f"Internal error: {sanitize_error(error)}"}

        error_object: Dict[str, Any] = {"code": code, "message": error.message}
        data = {key: value for key, value in data.items() if value is not None}
        if data:
            error_object["data"] = data
        return error_object

    def get_server_info(self) -> Dict[str, Any]:
        """Diagnostics snapshot."""
        return {
            "name": self.config.server.name,
            "version": self.config.server.version,
            "protocol_version": self.config.server.protocol_version,
            "state": self.state.value,
            "tools": self.tool_registry.get_stats(),
            "resources": self.resource_catalog.get_stats(),
            "prompts": self.prompt_catalog.get_stats(),
            "providers": self.provider_registry.get_diagnostics(),
        }
