"""Per-invocation event metadata attached to every telemetry event."""
from __future__ import annotations

import sys
import uuid
from dataclasses import dataclass

from stripe_cli import __version__


def user_agent() -> str:
    """User agent reported by the CLI, e.g. 'Stripe/v1 stripe-cli/1.19.4'."""
    return f"Stripe/v1 stripe-cli/{__version__}"


@dataclass
class EventMetadata:
    """Describes the current CLI invocation.

    Built once at startup. command_path and merchant are filled in later,
    once the invoked command and the active account are known.
    """

    invocation_id: str = ""
    user_agent: str = ""
    cli_version: str = ""
    os: str = ""
    command_path: str = ""
    merchant: str = ""
    generated_resource: bool = False

    def set_command_path(self, path: str) -> None:
        self.command_path = path

    def set_click_context(self, ctx) -> None:
        """Record the canonical path of the resolved click command.

        click joins parent and subcommand names with a single space,
        e.g. 'stripe telemetry status'.
        """
        self.set_command_path(ctx.command_path)

    def set_merchant(self, account_id: str) -> None:
        self.merchant = account_id

    def set_generated_resource(self, generated: bool = True) -> None:
        self.generated_resource = generated

    def to_form(self) -> dict[str, str]:
        """Metadata as flat form fields. Booleans become 'true'/'false'."""
        return {
            "cli_version": self.cli_version,
            "command_path": self.command_path,
            "generated_resource": _form_bool(self.generated_resource),
            "invocation_id": self.invocation_id,
            "merchant": self.merchant,
            "os": self.os,
            "user_agent": self.user_agent,
        }


def new_event_metadata() -> EventMetadata:
    """Build metadata for this process run."""
    return EventMetadata(
        invocation_id=str(uuid.uuid4()),
        user_agent=user_agent(),
        cli_version=__version__,
        os=sys.platform,
    )


def _form_bool(value: bool) -> str:
    return "true" if value else "false"
