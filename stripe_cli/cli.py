"""Click CLI entry point for the Stripe CLI."""
from __future__ import annotations

import functools
import logging
import sys

import click

from stripe_cli import __version__
from stripe_cli.config import (
    ensure_config,
    get_config_path,
    load_telemetry_config,
    set_telemetry_enabled,
)
from stripe_cli.output.terminal import print_telemetry_notice, render_status
from stripe_cli.telemetry import (
    AnalyticsTelemetryClient,
    NoOpTelemetryClient,
    TelemetryContext,
    TelemetryError,
    get_event_metadata,
    get_telemetry_client,
    new_event_metadata,
    with_event_metadata,
    with_telemetry_client,
)

logger = logging.getLogger(__name__)


@click.group(name="stripe")
@click.version_option(version=__version__, prog_name="stripe")
@click.option("--verbose", is_flag=True, help="Debug logging to stderr")
@click.option("--account", "account_id", envvar="STRIPE_ACCOUNT", default="",
              help="Account ID the command runs against")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, account_id: str) -> None:
    """Stripe CLI."""
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(name)s: %(message)s",
    )

    config_path = get_config_path()
    if ensure_config(config_path):
        print_telemetry_notice()

    cfg = load_telemetry_config(config_path)
    metadata = new_event_metadata()
    if account_id:
        metadata.set_merchant(account_id)

    if cfg.enabled:
        client = AnalyticsTelemetryClient.from_config(cfg)
    else:
        client = NoOpTelemetryClient()

    tctx = with_event_metadata(TelemetryContext(), metadata)
    ctx.obj = {
        "telemetry": with_telemetry_client(tctx, client),
        "telemetry_config": cfg,
    }


def pass_telemetry(f):
    """Record the resolved command path, then pass the TelemetryContext."""
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        tctx = ctx.obj["telemetry"]
        metadata = get_event_metadata(tctx)
        if metadata is not None:
            metadata.set_click_context(ctx)
        return f(tctx, *args, **kwargs)
    return wrapper


@cli.group()
def config() -> None:
    """Manage Stripe CLI configuration."""
    pass


_CONFIG_KEYS = ("telemetry",)


def _check_key(key: str) -> None:
    if key not in _CONFIG_KEYS:
        click.echo(f"Unknown config key: {key}", err=True)
        sys.exit(1)


@config.command("set")
@click.argument("key")
@click.argument("value", type=click.Choice(["on", "off"]))
@pass_telemetry
def config_set(tctx: TelemetryContext, key: str, value: str) -> None:
    """Set a configuration value. Supports: telemetry (on/off)."""
    _check_key(key)
    set_telemetry_enabled(get_config_path(), value == "on")
    click.echo(f"Telemetry {'enabled' if value == 'on' else 'disabled'}.")


@config.command("get")
@click.argument("key")
@pass_telemetry
@click.pass_obj
def config_get(obj: dict, tctx: TelemetryContext, key: str) -> None:
    """Get a configuration value, including environment overrides."""
    _check_key(key)
    cfg = obj["telemetry_config"]
    if cfg.enabled:
        click.echo("telemetry: on")
    elif cfg.disabled_by == "config":
        click.echo("telemetry: off")
    else:
        click.echo(f"telemetry: off (set by {cfg.disabled_by})")


@cli.group()
def telemetry() -> None:
    """Inspect and send usage telemetry."""
    pass


@telemetry.command("status")
@pass_telemetry
@click.pass_obj
def telemetry_status(obj: dict, tctx: TelemetryContext) -> None:
    """Show whether telemetry is enabled and what this invocation reports."""
    render_status(obj["telemetry_config"], get_event_metadata(tctx))


@telemetry.command("event")
@click.argument("event_name")
@click.argument("event_value", default="")
@pass_telemetry
def telemetry_event(tctx: TelemetryContext, event_name: str, event_value: str) -> None:
    """Send a generic usage event."""
    get_telemetry_client(tctx).send_event(tctx, event_name, event_value)


@telemetry.command("api-request")
@click.argument("request_id")
@click.option("--livemode", is_flag=True, help="The request was made in live mode")
@pass_telemetry
def telemetry_api_request(tctx: TelemetryContext, request_id: str, livemode: bool) -> None:
    """Report a completed API request by its request ID."""
    try:
        resp = get_telemetry_client(tctx).send_api_request_event(tctx, request_id, livemode)
    except TelemetryError as e:
        # Advisory only; never changes the exit status.
        logger.debug("%s", e)
        click.echo(f"  Telemetry not sent: {e}", err=True)
        return
    if resp is not None:
        resp.close()


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
