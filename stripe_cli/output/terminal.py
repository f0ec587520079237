"""Rich terminal output for telemetry notices and status."""
from __future__ import annotations

import sys

from rich.console import Console
from rich.panel import Panel
from rich.text import Text


def print_telemetry_notice(file=None) -> None:
    """Print the telemetry disclosure shown on first run.

    Args:
        file: Output stream. Default stderr so piped output stays clean.
    """
    out = file or sys.stderr
    c = Console(file=out, highlight=False)
    c.print(
        Panel(
            "The Stripe CLI sends anonymous usage data to help improve the CLI.\n"
            "No API keys or request payloads are collected.\n"
            "\n"
            "Disable:  stripe config set telemetry off\n"
            "Env var:  STRIPE_CLI_TELEMETRY_OPTOUT=1",
            expand=False,
        ),
        style="dim",
    )


def render_status(cfg, metadata, file=None) -> None:
    """Print the resolved telemetry settings for this invocation."""
    c = Console(file=file or sys.stdout, highlight=False)

    body = Text()
    if cfg.enabled:
        body.append("enabled", style="bold green")
    else:
        body.append("disabled", style="bold yellow")
        body.append(f" ({cfg.disabled_by})", style="dim")
    body.append("\n")
    rows = [
        ("endpoint", cfg.endpoint),
        ("invocation", metadata.invocation_id),
        ("command", metadata.command_path),
        ("version", metadata.cli_version),
        ("os", metadata.os),
    ]
    if metadata.merchant:
        rows.append(("account", metadata.merchant))
    for label, value in rows:
        body.append(f"{label:<11}", style="dim")
        body.append(f"{value}\n")

    c.print(Panel(body, title="Telemetry", expand=False))
