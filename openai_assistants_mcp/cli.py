"""Command-line interface for the OpenAI Assistants MCP server."""

import asyncio
import json
import logging
import sys
from typing import Optional

import click
from pydantic import ValidationError as ConfigValidationError

from .config import AppConfig, load_config
from .errors import ProviderInitError, RegistrationError
from .logging_utils import setup_logging
from .mcp_server.handlers.registry import ToolHandlerRegistry
from .mcp_server.prompts.catalog import CATEGORIES as PROMPT_CATEGORIES, PromptCatalog
from .mcp_server.resources.catalog import ResourceCatalog
from .mcp_server.server import BaseMCPHandler
from .providers import create_provider_registry
from .utils.request_context import ensure_request_id

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)"
)
@click.option(
    "--config", "--config-file", help="Path to configuration file (YAML, TOML, or JSON)"
)
@click.pass_context
def cli(ctx, log_level: Optional[str], config: Optional[str]):
    """OpenAI Assistants MCP server."""
    ctx.ensure_object(dict)

    try:
        app_config = load_config(config_file=config)
    except (FileNotFoundError, ValueError, ConfigValidationError) as e:
        click.echo(f"❌ Error: Invalid configuration: {e}", err=True)
        sys.exit(1)

    ctx.obj["config"] = app_config
    setup_logging(log_level or app_config.log_level, include_request_id=True)


async def _serve_stdio(handler: BaseMCPHandler) -> None:
    """Read newline-delimited JSON-RPC messages from stdin, answer on stdout."""
    loop = asyncio.get_running_loop()
    try:
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                logger.info("stdin closed, shutting down")
                break
            line = line.strip()
            if not line:
                continue

            try:
                response = await handler.handle_raw(line)
            except Exception as e:
                logger.exception(f"Failed to handle message: {e}")
                response = json.dumps(handler.internal_error_response(e))

            if response is not None:
                sys.stdout.write(response + "\n")
                sys.stdout.flush()
    finally:
        await handler.shutdown()


async def _run_server(app_config: AppConfig) -> None:
    handler = await BaseMCPHandler.create(app_config)
    info = handler.get_server_info()
    logger.info(
        f"Serving {info['tools']['total_handlers']} tools and {info['resources']['total']} resources "
        f"(default provider: {info['providers']['default_provider']})"
    )
    await _serve_stdio(handler)


@cli.command()
@click.option("--lazy-initialize", is_flag=True, help="Accept requests before 'initialize'")
@click.pass_context
def serve(ctx, lazy_initialize: bool):
    """Run the MCP server over stdio."""
    app_config: AppConfig = ctx.obj["config"]
    if lazy_initialize:
        app_config.server.lazy_initialize = True

    ensure_request_id()
    try:
        asyncio.run(_run_server(app_config))
    except (ProviderInitError, RegistrationError) as e:
        logger.error(f"Startup failed: {e}")
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


@cli.command()
@click.option("--names", is_flag=True, help="List every tool name")
def tools(names: bool):
    """Show the registered tools per category."""
    registry = ToolHandlerRegistry()
    stats = registry.get_stats()

    click.echo(f"🔧 {stats['total_handlers']} tools")
    for category, count in stats["handlers_by_category"].items():
        click.echo(f"  {category}: {count}")
        if names:
            for name in registry.get_tools_by_category(category):
                click.echo(f"    - {name}")


@cli.command()
@click.option("--category", type=click.Choice(["templates", "docs", "examples"]), default=None)
def resources(category: Optional[str]):
    """List the resource catalog."""
    catalog = ResourceCatalog()
    entries = catalog.list_by_category(category) if category else catalog.list_resources()

    click.echo(f"📚 {len(entries)} resources")
    for entry in entries:
        click.echo(f"  {entry.uri} ({entry.mime_type}) - {entry.name}")


@cli.command()
@click.option("--category", type=click.Choice(PROMPT_CATEGORIES), default=None)
def prompts(category: Optional[str]):
    """List the prompt templates and their arguments."""
    catalog = PromptCatalog()
    entries = catalog.list_by_category(category) if category else catalog.list_prompts()

    click.echo(f"💬 {len(entries)} prompts")
    for entry in entries:
        arguments = ", ".join(a.name if a.required else f"[{a.name}]" for a in entry.arguments)
        click.echo(f"  {entry.name}({arguments}) - {entry.title}")


async def _check_providers(app_config: AppConfig):
    registry = create_provider_registry(app_config.registry)
    await registry.initialize()
    try:
        await registry.check_health()
        return registry.get_diagnostics()
    finally:
        await registry.shutdown()


@cli.command()
@click.pass_context
def check(ctx):
    """Initialize the configured providers and report their health."""
    app_config: AppConfig = ctx.obj["config"]
    try:
        diagnostics = asyncio.run(_check_providers(app_config))
    except ProviderInitError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    for name, provider in diagnostics["providers"].items():
        ok = provider["health"] == "healthy"
        detail = f" ({provider['health_error']})" if provider["health_error"] else ""
        click.echo(f"{'✅' if ok else '❌'} {name}: {provider['health']}{detail}")
    for name, error in diagnostics["initialization_failures"].items():
        click.echo(f"❌ {name}: not initialized ({error})")

    if any(status != "healthy" for status in diagnostics["health"].values()):
        sys.exit(1)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
