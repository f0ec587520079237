"""Telemetry subsystem.

ARCHITECTURAL INVARIANT: Telemetry never fails the command it instruments.
Missing metadata and opt-out are silent skips. The only error that ever
reaches a caller is TelemetryError from send_api_request_event(), and even
that is advisory.

Nothing here is a process-wide singleton. Metadata and the client travel in
an immutable TelemetryContext that callers pass down explicitly.
"""
from stripe_cli.telemetry.client import (
    AnalyticsTelemetryClient,
    NoOpTelemetryClient,
    TelemetryError,
    telemetry_opted_out,
)
from stripe_cli.telemetry.context import (
    TelemetryContext,
    get_event_metadata,
    get_telemetry_client,
    with_event_metadata,
    with_telemetry_client,
)
from stripe_cli.telemetry.metadata import EventMetadata, new_event_metadata

__all__ = [
    "AnalyticsTelemetryClient",
    "EventMetadata",
    "NoOpTelemetryClient",
    "TelemetryContext",
    "TelemetryError",
    "get_event_metadata",
    "get_telemetry_client",
    "new_event_metadata",
    "telemetry_opted_out",
    "with_event_metadata",
    "with_telemetry_client",
]
