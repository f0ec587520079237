"""Immutable request scope carrying telemetry metadata and the client.

Callers thread a TelemetryContext explicitly through their call chain.
Attaching a value returns a derived context; the original is left as is.
Reading a value that was never attached returns None.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from stripe_cli.telemetry.client import AnalyticsTelemetryClient, NoOpTelemetryClient
    from stripe_cli.telemetry.metadata import EventMetadata


@dataclass(frozen=True)
class TelemetryContext:
    metadata: Optional["EventMetadata"] = None
    client: Optional["AnalyticsTelemetryClient | NoOpTelemetryClient"] = None


def with_event_metadata(ctx: TelemetryContext, metadata: "EventMetadata") -> TelemetryContext:
    return replace(ctx, metadata=metadata)


def get_event_metadata(ctx: TelemetryContext | None) -> "EventMetadata | None":
    if ctx is None:
        return None
    return ctx.metadata


def with_telemetry_client(ctx: TelemetryContext, client) -> TelemetryContext:
    return replace(ctx, client=client)


def get_telemetry_client(ctx: TelemetryContext | None):
    if ctx is None:
        return None
    return ctx.client
