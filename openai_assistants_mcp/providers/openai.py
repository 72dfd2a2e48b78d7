"""OpenAI Assistants API provider.

``OpenAIClient`` is a synchronous ``requests`` client for the Assistants v2
REST API; ``OpenAIProvider`` runs it in the default executor so the
dispatcher's event loop never blocks on HTTP.
"""

import asyncio
import contextvars
import functools
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests

from ..config import ProviderConfig
from ..errors import ProviderConfigError, ProviderError, ProviderTimeoutError
from ..utils.request_context import get_request_id
from ..utils.retry import retry_on_failure
from .base import Provider, ProviderCapabilities, ProviderFactory, ProviderMetadata

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 2
AUTH_DOCUMENTATION_URL = "https://platform.openai.com/docs/api-reference/authentication"
RATE_LIMIT_DOCUMENTATION_URL = "https://platform.openai.com/docs/guides/rate-limits"

LIST_QUERY_KEYS = ("limit", "order", "after", "before")

OPENAI_METADATA = ProviderMetadata(
    name="openai",
    display_name="OpenAI",
    version="2.0.0",
    description="OpenAI Assistants API (v2)",
    capabilities=ProviderCapabilities(
        assistants=True,
        threads=True,
        messages=True,
        runs=True,
        run_steps=True,
        function_calling=True,
        code_interpreter=True,
        file_search=True,
        streaming=False,
        max_context_length=128000,
        supported_models=[
            "gpt-4o",
            "gpt-4o-mini",
            "gpt-4-turbo",
            "gpt-4",
            "gpt-3.5-turbo",
        ],
    ),
    documentation_url="https://platform.openai.com/docs/assistants",
)


class OpenAIAPIError(Exception):
    """Exception raised for non-2xx responses from the OpenAI API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Dict] = None,
        endpoint: Optional[str] = None,
        retry_after: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data
        self.endpoint = endpoint
        self.retry_after = retry_after

    def __str__(self):
        parts = [str(self.args[0])]

        if self.status_code:
            parts.append(f"Status: {self.status_code}")

        if self.endpoint:
            parts.append(f"Endpoint: {self.endpoint}")

        if self.status_code == 401:
            parts.append("Check your OpenAI API key")
        elif self.status_code == 403:
            parts.append("The API key lacks access to this resource")
        elif self.status_code == 404:
            parts.append("Resource not found - check the identifiers")
        elif self.status_code == 429:
            parts.append("Rate limit exceeded")
        elif self.status_code and self.status_code >= 500:
            parts.append("OpenAI server error")

        return " | ".join(parts)


def _extract_error_message(error_data: Dict[str, Any]) -> str:
    error = error_data.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str):
        return error
    return str(error_data.get("message") or "Unknown error")


class OpenAIClient:
    """Synchronous client for the OpenAI Assistants REST API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        organization: Optional[str] = None,
        project: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = 1.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "OpenAI-Beta": "assistants=v2",
        })
        if organization:
            self.session.headers["OpenAI-Organization"] = organization
        if project:
            self.session.headers["OpenAI-Project"] = project

        self.request = retry_on_failure(max_retries=max_retries, delay=retry_delay)(self._request_once)

    def _request_once(
        self,
        method: str,
        endpoint: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make one HTTP request and decode the JSON body."""
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = {}
        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id

        self.logger.debug(f"{method} {url}")
        response = self.session.request(
            method=method,
            url=url,
            json=payload,
            params=params,
            headers=headers,
            timeout=self.timeout,
        )
        self.logger.debug(f"{method} {url} -> {response.status_code}")

        if response.status_code == 204:
            return {}

        if response.status_code >= 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {"message": response.text or "No error message provided"}
            if not isinstance(error_data, dict):
                error_data = {"message": str(error_data)}

            raise OpenAIAPIError(
                f"API request failed: {_extract_error_message(error_data)}",
                status_code=response.status_code,
                response_data=error_data,
                endpoint=endpoint,
                retry_after=response.headers.get("Retry-After"),
            )

        return response.json()

    def close(self) -> None:
        self.session.close()


def _list_params(params: Dict[str, Any]) -> Dict[str, Any]:
    query = {key: params[key] for key in LIST_QUERY_KEYS if params.get(key) is not None}
    if params.get("include"):
        query["include[]"] = list(params["include"])
    return query


class OpenAIProvider(Provider):
    """Provider backed by the OpenAI Assistants API."""

    def __init__(self, client: OpenAIClient):
        self.client = client

    @property
    def metadata(self) -> ProviderMetadata:
        return OPENAI_METADATA

    async def _call(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        """Run a client request in the default executor and translate failures."""
        loop = asyncio.get_running_loop()
        ctx = contextvars.copy_context()
        call = functools.partial(self.client.request, method, endpoint, **kwargs)
        try:
            return await loop.run_in_executor(None, ctx.run, call)
        except OpenAIAPIError as e:
            raise self._to_provider_error(e) from e
        except requests.exceptions.Timeout as e:
            raise ProviderTimeoutError(
                f"OpenAI request timed out: {method} {endpoint}",
                provider_name=self.name,
                timeout=self.client.timeout,
            ) from e
        except requests.exceptions.RequestException as e:
            raise ProviderError(
                f"OpenAI request failed: {e}",
                provider_name=self.name,
                category="network",
                retryable=True,
            ) from e

    def _to_provider_error(self, error: OpenAIAPIError) -> ProviderError:
        status = error.status_code
        documentation = self.metadata.documentation_url
        retry_after = None
        retryable = False

        if status == 401:
            category = "authentication"
            documentation = AUTH_DOCUMENTATION_URL
        elif status == 403:
            category = "authorization"
        elif status == 404:
            category = "resource"
        elif status == 429:
            category = "rate_limiting"
            documentation = RATE_LIMIT_DOCUMENTATION_URL
            retryable = True
            retry_after = f"{error.retry_after}s" if error.retry_after else "60s"
        elif status and status >= 500:
            category = "server"
            retryable = True
        else:
            category = "request"

        return ProviderError(
            str(error.args[0]),
            provider_name=self.name,
            status_code=status,
            category=category,
            retryable=retryable,
            retry_after=retry_after,
            documentation=documentation,
            response_data=error.response_data,
        )

    async def validate_connection(self) -> bool:
        try:
            await self._call("GET", "models")
            return True
        except ProviderError as e:
            logger.warning(f"OpenAI connection check failed: {e}")
            return False

    async def close(self) -> None:
        self.client.close()

    # Assistants
    async def create_assistant(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("POST", "assistants", payload=request)

    async def list_assistants(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("GET", "assistants", params=_list_params(params))

    async def get_assistant(self, assistant_id: str) -> Dict[str, Any]:
        return await self._call("GET", f"assistants/{assistant_id}")

    async def update_assistant(self, assistant_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("POST", f"assistants/{assistant_id}", payload=request)

    async def delete_assistant(self, assistant_id: str) -> Dict[str, Any]:
        return await self._call("DELETE", f"assistants/{assistant_id}")

    # Threads
    async def create_thread(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("POST", "threads", payload=request)

    async def get_thread(self, thread_id: str) -> Dict[str, Any]:
        return await self._call("GET", f"threads/{thread_id}")

    async def update_thread(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("POST", f"threads/{thread_id}", payload=request)

    async def delete_thread(self, thread_id: str) -> Dict[str, Any]:
        return await self._call("DELETE", f"threads/{thread_id}")

    # Messages
    async def create_message(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("POST", f"threads/{thread_id}/messages", payload=request)

    async def list_messages(self, thread_id: str, params: Dict[str, Any]) -> Dict[str, Any]:
        query = _list_params(params)
        if params.get("run_id"):
            query["run_id"] = params["run_id"]
        return await self._call("GET", f"threads/{thread_id}/messages", params=query)

    async def get_message(self, thread_id: str, message_id: str) -> Dict[str, Any]:
        return await self._call("GET", f"threads/{thread_id}/messages/{message_id}")

    async def update_message(self, thread_id: str, message_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("POST", f"threads/{thread_id}/messages/{message_id}", payload=request)

    async def delete_message(self, thread_id: str, message_id: str) -> Dict[str, Any]:
        return await self._call("DELETE", f"threads/{thread_id}/messages/{message_id}")

    # Runs
    async def create_run(self, thread_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("POST", f"threads/{thread_id}/runs", payload=request)

    async def list_runs(self, thread_id: str, params: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("GET", f"threads/{thread_id}/runs", params=_list_params(params))

    async def get_run(self, thread_id: str, run_id: str) -> Dict[str, Any]:
        return await self._call("GET", f"threads/{thread_id}/runs/{run_id}")

    async def update_run(self, thread_id: str, run_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("POST", f"threads/{thread_id}/runs/{run_id}", payload=request)

    async def cancel_run(self, thread_id: str, run_id: str) -> Dict[str, Any]:
        return await self._call("POST", f"threads/{thread_id}/runs/{run_id}/cancel")

    async def submit_tool_outputs(self, thread_id: str, run_id: str, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call(
            "POST", f"threads/{thread_id}/runs/{run_id}/submit_tool_outputs", payload=request
        )

    # Run steps
    async def list_run_steps(self, thread_id: str, run_id: str, params: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call(
            "GET", f"threads/{thread_id}/runs/{run_id}/steps", params=_list_params(params)
        )

    async def get_run_step(self, thread_id: str, run_id: str, step_id: str) -> Dict[str, Any]:
        return await self._call("GET", f"threads/{thread_id}/runs/{run_id}/steps/{step_id}")


class OpenAIProviderFactory(ProviderFactory):
    """Builds ``OpenAIProvider`` instances from ``ProviderConfig``."""

    @property
    def metadata(self) -> ProviderMetadata:
        return OPENAI_METADATA

    def validate_config(self, config: ProviderConfig) -> None:
        api_key = config.credentials.get("api_key", "")
        if not api_key or not api_key.strip():
            raise ProviderConfigError(self.name, "credentials.api_key is required (set OPENAI_API_KEY)")

        base_url = config.options.get("base_url") or DEFAULT_BASE_URL
        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ProviderConfigError(self.name, f"invalid base_url: {base_url}")

        timeout = config.options.get("timeout", DEFAULT_TIMEOUT)
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
            raise ProviderConfigError(self.name, "options.timeout must be a positive number")

        max_retries = config.options.get("max_retries", DEFAULT_MAX_RETRIES)
        if not isinstance(max_retries, int) or isinstance(max_retries, bool) or not 0 <= max_retries <= 10:
            raise ProviderConfigError(self.name, "options.max_retries must be an integer between 0 and 10")

    def create(self, config: ProviderConfig) -> OpenAIProvider:
        options = config.options
        client = OpenAIClient(
            api_key=config.credentials["api_key"].strip(),
            base_url=options.get("base_url") or DEFAULT_BASE_URL,
            organization=options.get("organization"),
            project=options.get("project"),
            timeout=float(options.get("timeout", DEFAULT_TIMEOUT)),
            max_retries=options.get("max_retries", DEFAULT_MAX_RETRIES),
            retry_delay=float(options.get("retry_delay", 1.0)),
        )
        return OpenAIProvider(client)
