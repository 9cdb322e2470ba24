"""Main CLI entry point for modelgate.

Inspect provider resolution from the shell: run a resolution with optional
overrides, list the provider catalog against the current environment, and
check prompt-caching support for a model id.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from modelgate import __version__
from modelgate.core.catalog import PROVIDER_CATALOG
from modelgate.core.config import AI_PROVIDER_ENV, ClientOverrides, EnvironmentSnapshot
from modelgate.core.errors import ModelResolutionError
from modelgate.core.model_families import supports_prompt_caching
from modelgate.core.providers import ModelDescriptor
from modelgate.core.resolver import configured_providers, detect_provider, resolve_model
from modelgate.utils.log import get_logger, init_logger

console = Console()
logger = get_logger()

_env_file_option = click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Dotenv file layered beneath the process environment",
)


def _load_env(env_file: Optional[str]) -> EnvironmentSnapshot:
    if env_file:
        return EnvironmentSnapshot.from_env_file(env_file)
    return EnvironmentSnapshot.from_environ()


def describe_descriptor(descriptor: ModelDescriptor) -> Dict[str, Any]:
    """Summarize a descriptor without exposing credentials."""
    reference = descriptor.model_reference
    return {
        "provider": reference.provider.value,
        "model_id": descriptor.model_id,
        "path": reference.path.value,
        "api": reference.api.value,
        "base_url": reference.base_url,
        "provider_options": descriptor.provider_options,
        "headers": descriptor.headers,
    }


@click.group()
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Also write debug logs to a daily file in this directory",
)
def cli(log_dir: Optional[Path]) -> None:
    """modelgate - resolve and configure LLM provider connections."""
    if log_dir is not None:
        init_logger(log_dir)


@cli.command(name="resolve")
@click.option("--provider", default=None, help="Client provider override")
@click.option("--base-url", default=None, help="Client endpoint override (requires --api-key)")
@click.option("--api-key", default=None, help="Client API key override")
@click.option("--model", "model_id", default=None, help="Model id override")
@_env_file_option
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def resolve_cmd(
    provider: Optional[str],
    base_url: Optional[str],
    api_key: Optional[str],
    model_id: Optional[str],
    env_file: Optional[str],
    as_json: bool,
) -> None:
    """Resolve the model for one request and show how it was configured."""
    overrides = ClientOverrides(
        provider=provider, base_url=base_url, api_key=api_key, model_id=model_id
    )
    try:
        descriptor = resolve_model(overrides, _load_env(env_file))
    except ModelResolutionError as exc:
        logger.debug(
            "[cli] Resolution failed",
            extra={"error_code": exc.error_code},
        )
        raise click.ClickException(str(exc)) from exc

    summary = describe_descriptor(descriptor)
    if as_json:
        click.echo(json.dumps(summary, indent=2, sort_keys=True))
        return

    console.print("\n[bold]Resolved Model[/bold]\n")
    console.print(f"Provider: {summary['provider']}")
    console.print(f"Model: {escape(summary['model_id'])}")
    console.print(f"Construction: {summary['path']} ({summary['api']})")
    console.print(f"Endpoint: {escape(summary['base_url'] or 'SDK default')}")
    if summary["provider_options"]:
        console.print("Provider Options:")
        console.print_json(data=summary["provider_options"])
    if summary["headers"]:
        console.print(f"Headers: {', '.join(sorted(summary['headers']))}")
    console.print()


@cli.command(name="providers")
@_env_file_option
def providers_cmd(env_file: Optional[str]) -> None:
    """List supported providers and their configuration status."""
    env = _load_env(env_file)
    configured = set(configured_providers(env))

    table = Table(title="Providers")
    table.add_column("Provider")
    table.add_column("Credential")
    table.add_column("Configured")
    table.add_column("Client override")
    table.add_column("Default endpoint")
    for name, meta in PROVIDER_CATALOG.items():
        if meta.required_credential_env_var is None:
            status = "[dim]no key needed[/dim]"
        elif name in configured:
            status = "[green]yes[/green]"
        else:
            status = "[yellow]no[/yellow]"
        table.add_row(
            name.value,
            meta.required_credential_env_var or "-",
            status,
            "yes" if meta.allowed_for_client_override else "no",
            meta.default_base_url or "-",
        )
    console.print(table)

    selected = env.value(AI_PROVIDER_ENV)
    if selected:
        console.print(f"{AI_PROVIDER_ENV}: {escape(selected)}")
        return
    try:
        console.print(f"Auto-detected: {detect_provider(env).value}")
    except ModelResolutionError as exc:
        console.print(f"[yellow]Auto-detection: {escape(str(exc))}[/yellow]")


@cli.command(name="caching")
@click.argument("model_id")
def caching_cmd(model_id: str) -> None:
    """Report whether a model supports provider-side prompt caching."""
    supported = supports_prompt_caching(model_id)
    label = "supported" if supported else "not supported"
    console.print(f"Prompt caching for {escape(model_id)}: {label}")


@cli.command(name="version")
def version_cmd() -> None:
    """Show version information"""
    console.print(f"modelgate version {__version__}")


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except SystemExit:
        raise
    except (RuntimeError, ValueError, OSError) as e:
        console.print(f"[red]Fatal error: {escape(str(e))}[/red]")
        logger.warning(
            "[cli] Fatal error in main CLI entrypoint: %s: %s",
            type(e).__name__,
            e,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
