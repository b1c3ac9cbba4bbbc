"""CLI commands for the delivery dashboard."""

import asyncio
import logging
import sys
from dataclasses import dataclass

import click
import structlog

from delivery_dashboard import __version__
from delivery_dashboard.config.constants import COMPONENT_CLI, PRODUCTS
from delivery_dashboard.dashboard.presenter import build_snapshot, render_text
from delivery_dashboard.dashboard.view import DashboardView
from delivery_dashboard.fetch.client import PollbotClient
from delivery_dashboard.observability.logging import configure_logging
from delivery_dashboard.orchestration.orchestrator import CheckOrchestrator
from delivery_dashboard.settings import get_settings
from delivery_dashboard.status.aggregator import verdict_for_state
from delivery_dashboard.status.models import Verdict
from delivery_dashboard.store.models import ApplicationState
from delivery_dashboard.store.store import StateStore


logger = structlog.get_logger()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Exit codes of the status command
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INCOMPLETE = 2


@dataclass
class CliOptions:
    """Options shared by all commands."""

    pollbot_url: str
    request_timeout_seconds: float
    refresh_interval_seconds: float


def exit_code_for(state: ApplicationState) -> int:
    """Map the final state of a status run to an exit code.

    Args:
        state: Final dashboard state.

    Returns:
        0 if every actionable check passed, 1 if one failed, 2 otherwise.
    """
    verdict = verdict_for_state(state)
    if verdict == Verdict.SUCCESS:
        return EXIT_SUCCESS
    if verdict == Verdict.FAILURE:
        return EXIT_FAILURE
    return EXIT_INCOMPLETE


class SnapshotPrinter:
    """Store listener printing the dashboard whenever its text changes."""

    def __init__(self) -> None:
        self._last_text: str | None = None

    def __call__(self, state: ApplicationState) -> None:
        text = render_text(build_snapshot(state))
        if text == self._last_text:
            return
        self._last_text = text
        click.echo(text)
        click.echo("-" * 40)


async def _run_status(
    options: CliOptions, product: str, version: str
) -> ApplicationState:
    async with PollbotClient(
        options.pollbot_url, options.request_timeout_seconds
    ) as client:
        store = StateStore()
        orchestrator = CheckOrchestrator(store, client)
        try:
            await orchestrator.request_service_version()
            await orchestrator.request_status(product, version)
            await orchestrator.wait_idle()
        finally:
            await orchestrator.aclose()
        return store.state


async def _run_watch(
    options: CliOptions, fragment: str, duration: float | None
) -> None:
    async with PollbotClient(
        options.pollbot_url, options.request_timeout_seconds
    ) as client:
        async with DashboardView(client, options.refresh_interval_seconds) as view:
            unsubscribe = view.store.subscribe(SnapshotPrinter())
            try:
                view.mount(fragment)
                if duration is None:
                    await asyncio.Event().wait()
                else:
                    await asyncio.sleep(duration)
            finally:
                unsubscribe()


async def _run_versions(options: CliOptions) -> ApplicationState:
    async with PollbotClient(
        options.pollbot_url, options.request_timeout_seconds
    ) as client:
        store = StateStore()
        await CheckOrchestrator(store, client).request_ongoing_versions(PRODUCTS)
        return store.state


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--pollbot-url",
    default=None,
    help="Pollbot API root (default: POLLBOT_URL or the production service).",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: LOG_LEVEL or INFO).",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: JSON_LOGS or false).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    pollbot_url: str | None,
    log_level: str | None,
    json_logs: bool | None,
) -> None:
    """Release delivery dashboard backed by Pollbot."""
    settings = get_settings()
    level_name = (log_level or settings.log_level).upper()
    configure_logging(
        level=getattr(logging, level_name, logging.INFO),
        json_format=settings.json_logs if json_logs is None else json_logs,
    )
    ctx.obj = CliOptions(
        pollbot_url=pollbot_url or settings.pollbot_url,
        request_timeout_seconds=settings.request_timeout_seconds,
        refresh_interval_seconds=settings.refresh_interval_seconds,
    )


@cli.command()
@click.argument("product", type=click.Choice(PRODUCTS))
@click.argument("version")
@click.pass_obj
def status(options: CliOptions, product: str, version: str) -> None:
    """Fetch every check of a release once and print the verdict.

    Exits 0 when all actionable checks pass, 1 when one fails and 2 when
    the verdict could not be established.
    """
    state = asyncio.run(_run_status(options, product, version))
    click.echo(render_text(build_snapshot(state)))

    code = exit_code_for(state)
    logger.info(
        "status_complete",
        component=COMPONENT_CLI,
        product=product,
        version=version,
        exit_code=code,
    )
    sys.exit(code)


@cli.command()
@click.argument("fragment", default="")
@click.option(
    "--duration",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Stop after this many seconds (default: run until interrupted).",
)
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Auto-refresh interval in seconds (default: REFRESH_INTERVAL_SECONDS).",
)
@click.pass_obj
def watch(
    options: CliOptions,
    fragment: str,
    duration: float | None,
    interval: float | None,
) -> None:
    """Watch a release given as a deep link, e.g. '#pollbot/thunderbird/60.0'."""
    if interval is not None:
        options.refresh_interval_seconds = interval
    try:
        asyncio.run(_run_watch(options, fragment, duration))
    except KeyboardInterrupt:
        click.echo("Stopped.")


@cli.command()
@click.pass_obj
def versions(options: CliOptions) -> None:
    """Print the current version of every channel."""
    state = asyncio.run(_run_versions(options))
    for product in PRODUCTS:
        channels = state.product_versions.get(product)
        if not channels:
            click.echo(f"{product}: unavailable", err=True)
            continue
        click.echo(product)
        for channel, version in channels.items():
            click.echo(f"  {channel}: {version}")


if __name__ == "__main__":
    cli()
