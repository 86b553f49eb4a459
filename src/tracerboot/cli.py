"""CLI for checking tracer configuration.

Example:
    $ TRACING_TOOL=STDOUT tracerboot resolve
    $ tracerboot check --tool JAEGER --jaeger-endpoint localhost:4318 \\
        --service orders --environment staging --module api
"""

import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tracerboot import state
from tracerboot.backends import Backend
from tracerboot.bootstrap import DEFAULT_TIMEOUT, TracerBootstrap
from tracerboot.config import LoggingConfig, TracerConfig
from tracerboot.exceptions import TracerBootstrapError
from tracerboot.logging import LoggerManager
from tracerboot.sampler import build_sampler

console = Console()


def config_options(func):
    """Options shared by commands that build a TracerConfig."""
    options = [
        click.option("--tool", envvar="TRACING_TOOL", default="",
                     help="Backend selector: GCP, STDOUT or JAEGER"),
        click.option("--otlp-endpoint", envvar="OTLP_ENDPOINT", default="",
                     help="Collector endpoint used when --jaeger-endpoint is unset"),
        click.option("--project", envvar="GOOGLE_CLOUD_PROJECT", default="",
                     help="Google Cloud project ID"),
        click.option("--jaeger-endpoint", envvar="JAEGER_ENDPOINT", default="",
                     help="Collector endpoint for the JAEGER backend"),
        click.option("--sampling-rate", envvar="TRACER_SAMPLING_RATE", default="",
                     help="Sampling ratio 0.0-1.0 (empty samples everything)"),
        click.option("--protocol", envvar="OTLP_PROTOCOL", default="http",
                     type=click.Choice(["http", "grpc"], case_sensitive=False),
                     help="Collector protocol (default: http)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_config(
    tool: str,
    otlp_endpoint: str,
    project: str,
    jaeger_endpoint: str,
    sampling_rate: str,
    protocol: str,
) -> TracerConfig:
    return TracerConfig(
        tracing_tool=tool,
        otlp_endpoint=otlp_endpoint,
        google_cloud_project=project,
        jaeger_endpoint=jaeger_endpoint,
        sampling_rate=sampling_rate,
        otlp_protocol=protocol.lower(),
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("--log-format", type=click.Choice(["text", "json"]), default="text",
              help="Diagnostic log format")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, log_format: str) -> None:
    """Tracer bootstrap tools.

    Inspect which tracing backend a configuration selects, or run the full
    bootstrap once to confirm spans reach the backend.
    """
    manager = LoggerManager(
        LoggingConfig(level="DEBUG" if verbose else "INFO", format=log_format)
    )
    manager.configure()
    ctx.call_on_close(manager.shutdown)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@config_options
def resolve(**options: str) -> None:
    """Show the backend and sampler a configuration selects.

    Nothing is exported and no network calls are made.
    """
    config = _build_config(**options)

    table = Table(title="Tracer Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Tracing tool", config.tracing_tool or "[red](empty)[/red]")
    table.add_row("Backend", Backend.resolve(config).name)
    table.add_row("Collector endpoint", config.collector_endpoint or "-")
    table.add_row("Collector protocol", config.otlp_protocol)
    table.add_row("GCP project", config.google_cloud_project or "-")

    console.print(table)
    # Descriptions have no spaces to wrap on
    console.print(
        f"Sampler: {build_sampler(config.sampling_rate).get_description()}",
        soft_wrap=True,
        highlight=False,
    )


@cli.command()
@config_options
@click.option("--service", "service_name", required=True, help="Service name")
@click.option("--environment", default="development", help="Deployment environment")
@click.option("--module", "module_name", default="", help="Module name")
@click.option("--timeout", type=float, default=DEFAULT_TIMEOUT,
              help=f"Backend construction timeout in seconds (default: {DEFAULT_TIMEOUT})")
def check(
    service_name: str,
    environment: str,
    module_name: str,
    timeout: float,
    **options: str,
) -> None:
    """Run the tracer bootstrap once and flush the self-test span."""
    config = _build_config(**options)
    bootstrap = TracerBootstrap(
        service_name, environment, module_name, config, timeout=timeout
    )

    try:
        provider = bootstrap.run()
    except TracerBootstrapError as e:
        console.print(f"[red]Tracer bootstrap failed:[/red] {escape(str(e))}")
        sys.exit(1)

    if provider is None:
        tool = escape(repr(config.tracing_tool))
        console.print(f"[yellow]No backend matches {tool}, tracing disabled[/yellow]")
        return

    try:
        _print_resource(bootstrap.backend, dict(provider.resource.attributes))
    finally:
        state.shutdown_tracing()

    console.print("[green]Self-test span flushed to exporter[/green]")


def _print_resource(backend: Optional[Backend], attributes: dict) -> None:
    table = Table(title=f"{backend.name if backend else '-'} Resource")
    table.add_column("Attribute", style="cyan")
    table.add_column("Value", style="green")
    for key in sorted(attributes):
        table.add_row(key, str(attributes[key]))
    console.print(table)


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
