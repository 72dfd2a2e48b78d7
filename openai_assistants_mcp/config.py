"""Configuration management for the OpenAI Assistants MCP server."""

import os
import json
import logging
import tomllib
from pathlib import Path
from typing import Optional, Dict, Any, Union, List, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator


class ProviderConfig(BaseModel):
    """Configuration for one assistants backend provider."""

    provider_name: str = Field(..., description="Name of the provider factory to use")
    credentials: Dict[str, str] = Field(default_factory=dict, description="Provider credentials")
    priority: Optional[int] = Field(None, description="Selection priority, lower is preferred")
    enabled: bool = Field(default=True, description="Whether the provider is initialized at all")
    required: bool = Field(
        default=True,
        description="Whether a failure to initialize this provider aborts startup",
    )
    options: Dict[str, Any] = Field(default_factory=dict, description="Provider-specific options")

    @field_validator('provider_name')
    @classmethod
    def validate_provider_name(cls, v: str) -> str:
        """Validate that provider_name is a non-empty identifier."""
        if not v or not v.strip():
            raise ValueError("provider_name cannot be empty")
        return v.strip().lower()


class RegistryConfig(BaseModel):
    """Configuration for provider selection and health handling."""

    default_provider: Optional[str] = Field(None, description="Provider used when no hint is given")
    health_policy: Literal["advisory", "hard"] = Field(
        default="advisory",
        description="'hard' excludes unhealthy providers from selection",
    )
    health_check_on_startup: bool = Field(
        default=False, description="Check each provider's connection during initialize()"
    )
    provider_timeout: float = Field(default=60.0, description="Timeout in seconds for a provider call")
    providers: List[ProviderConfig] = Field(default_factory=list)

    @field_validator('provider_timeout')
    @classmethod
    def validate_provider_timeout(cls, v: float) -> float:
        """Validate provider_timeout is reasonable."""
        if v <= 0:
            raise ValueError("provider_timeout must be positive")
        if v > 600:
            raise ValueError("provider_timeout should not exceed 600 seconds")
        return v


class ServerConfig(BaseModel):
    """Configuration for the MCP protocol surface."""

    name: str = Field(default="openai-assistants-mcp", description="Server name reported on initialize")
    version: str = Field(default="0.1.0", description="Server version reported on initialize")
    protocol_version: str = Field(default="2024-11-05", description="MCP protocol version")
    lazy_initialize: bool = Field(
        default=False,
        description="Treat requests before 'initialize' as an implicit handshake",
    )
    page_size: int = Field(default=50, description="Page size for tools/list, resources/list and prompts/list")

    @field_validator('page_size')
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """Validate page_size is positive."""
        if v < 1:
            raise ValueError("page_size must be at least 1")
        return v


class AppConfig(BaseModel):
    """Main application configuration."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log_level names a logging level."""
        if not isinstance(getattr(logging, v.upper(), None), int):
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @model_validator(mode='after')
    def validate_default_provider(self) -> "AppConfig":
        """The default provider, when set, must be one of the configured providers."""
        default = self.registry.default_provider
        names = {p.provider_name for p in self.registry.providers}
        if default and names and default not in names:
            raise ValueError(f"default_provider '{default}' is not among configured providers {sorted(names)}")
        return self


def load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from a YAML, TOML or JSON file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger = logging.getLogger(__name__)
    suffix = config_path.suffix.lower()

    try:
        if suffix == '.toml':
            with open(config_path, 'rb') as f:
                return tomllib.load(f)

        with open(config_path, 'r', encoding='utf-8') as f:
            if suffix in ['.yaml', '.yml']:
                return yaml.safe_load(f) or {}
            elif suffix == '.json':
                return json.load(f) or {}
            else:
                raise ValueError(f"Unsupported config file format: {config_path.suffix}")

    except Exception as e:
        logger.error(f"Failed to load config file {config_path}: {e}")
        raise


def find_config_file() -> Optional[Path]:
    """Find configuration file in standard locations."""
    search_paths = [
        Path.cwd() / ".openai-assistants-mcp.yaml",
        Path.cwd() / ".openai-assistants-mcp.yml",
        Path.cwd() / ".openai-assistants-mcp.toml",
        Path.cwd() / ".openai-assistants-mcp.json",
        Path.home() / ".config" / "openai-assistants-mcp" / "config.yaml",
        Path.home() / ".config" / "openai-assistants-mcp" / "config.toml",
        Path.home() / ".config" / "openai-assistants-mcp" / "config.json",
    ]

    for config_path in search_paths:
        if config_path.exists():
            return config_path

    return None


def merge_config(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """Merge configuration dictionaries with override taking precedence."""
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value

    return merged


def _remove_none_values(d: Any) -> Any:
    if isinstance(d, dict):
        return {k: _remove_none_values(v) for k, v in d.items() if v is not None}
    return d


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


def _openai_provider_from_env(existing: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build (or override) the openai provider entry from environment variables."""
    provider = dict(existing or {"provider_name": "openai"})
    credentials = dict(provider.get("credentials") or {})
    options = dict(provider.get("options") or {})

    api_key = os.getenv("OPENAI_API_KEY")
    if api_key is not None:
        credentials["api_key"] = api_key
    credentials.setdefault("api_key", "")

    options.update(_remove_none_values({
        "base_url": os.getenv("OPENAI_BASE_URL"),
        "organization": os.getenv("OPENAI_ORGANIZATION"),
        "project": os.getenv("OPENAI_PROJECT"),
    }))

    provider["credentials"] = credentials
    provider["options"] = options
    return provider


def load_config(config_file: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load configuration from multiple sources with priority order.

    Priority (highest to lowest):
    1. Environment variables
    2. Specified config file (if provided)
    3. Auto-discovered config file
    4. Default values

    When no provider is configured, an ``openai`` provider is built from
    ``OPENAI_API_KEY`` and friends. An unset key stays empty and fails
    provider initialization at startup.
    """
    logger = logging.getLogger(__name__)

    config_data: Dict[str, Any] = {}

    if config_file:
        config_path = Path(config_file)
        if config_path.exists():
            config_data = load_config_file(config_path)
            logger.info(f"Loaded configuration from: {config_path}")
        else:
            raise FileNotFoundError(f"Specified config file not found: {config_path}")
    else:
        config_path = find_config_file()
        if config_path:
            config_data = load_config_file(config_path)
            logger.info(f"Auto-discovered configuration file: {config_path}")

    load_dotenv()

    timeout = os.getenv("MCP_PROVIDER_TIMEOUT")
    env_config = _remove_none_values({
        "server": {
            "lazy_initialize": _env_flag("MCP_LAZY_INITIALIZE"),
        },
        "registry": {
            "default_provider": os.getenv("MCP_DEFAULT_PROVIDER"),
            "health_policy": os.getenv("MCP_HEALTH_POLICY"),
            "health_check_on_startup": _env_flag("MCP_HEALTH_CHECK_ON_STARTUP"),
            "provider_timeout": float(timeout) if timeout else None,
        },
        "log_level": os.getenv("LOG_LEVEL"),
    })

    final_config = merge_config(config_data, env_config)

    registry_data = dict(final_config.get("registry") or {})
    providers = list(registry_data.get("providers") or [])
    openai_index = next(
        (i for i, p in enumerate(providers) if str(p.get("provider_name", "")).lower() == "openai"),
        None,
    )
    if openai_index is not None:
        providers[openai_index] = _openai_provider_from_env(providers[openai_index])
    elif not providers:
        providers.append(_openai_provider_from_env())
    registry_data["providers"] = providers
    final_config["registry"] = registry_data

    return AppConfig(**final_config)
