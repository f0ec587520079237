"""Analytics telemetry client. POST only, form-encoded, one round trip per event.

Events are sent only when the context carries EventMetadata and the user has
not opted out through STRIPE_CLI_TELEMETRY_OPTOUT. Nothing is retried or
batched. send_event() never raises; send_api_request_event() raises
TelemetryError when the POST itself fails so inline callers can tell.
"""
from __future__ import annotations

import http.client
import logging
import os
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from stripe_cli.telemetry.context import TelemetryContext, get_event_metadata

if TYPE_CHECKING:
    from stripe_cli.config import TelemetryConfig

logger = logging.getLogger(__name__)

CLIENT_ID = "stripe-cli"
API_REQUEST_EVENT = "API Request"
OPTOUT_ENV = "STRIPE_CLI_TELEMETRY_OPTOUT"
TIMEOUT_SECONDS = 5

# Anything that can go wrong between opening the socket and reading the
# status line, including replies that are not HTTP at all.
_POST_ERRORS = (urllib.error.URLError, http.client.HTTPException, OSError, ValueError)


class TelemetryError(RuntimeError):
    """Raised when an API request event could not be posted."""


def telemetry_opted_out(value: str | None) -> bool:
    """True for '1' or 'true' in any casing, False for anything else."""
    value = value or ""
    return value == "1" or value.lower() == "true"


@dataclass(frozen=True)
class AnalyticsTelemetryClient:
    """Posts telemetry events to a fixed analytics endpoint."""

    base_url: urllib.parse.SplitResult
    http_client: urllib.request.OpenerDirector = field(
        default_factory=urllib.request.build_opener, compare=False,
    )
    timeout: float | None = TIMEOUT_SECONDS

    @classmethod
    def from_url(cls, url: str, timeout: float | None = TIMEOUT_SECONDS) -> "AnalyticsTelemetryClient":
        return cls(base_url=urllib.parse.urlsplit(url), timeout=timeout)

    @classmethod
    def from_config(cls, cfg: "TelemetryConfig") -> "AnalyticsTelemetryClient":
        """Build a client from a resolved TelemetryConfig."""
        return cls.from_url(cfg.endpoint, timeout=cfg.timeout)

    def send_event(self, ctx: TelemetryContext, event_name: str, event_value: str) -> None:
        """Send a generic event. Best effort: failures are logged and dropped."""
        data = self._event_data(ctx)
        if data is None:
            return
        data["event_name"] = event_name
        data["event_value"] = event_value

        try:
            resp = self._post(data)
        except _POST_ERRORS as e:
            logger.debug("Telemetry event %r failed: %s", event_name, e)
            return
        with resp:
            logger.debug("Telemetry event %r: HTTP %d", event_name, resp.status)

    def send_api_request_event(self, ctx: TelemetryContext, request_id: str, livemode: bool):
        """Send an 'API Request' event for a completed Stripe API call.

        Returns the HTTP response, which the caller must close, or None when
        the event was skipped. Raises TelemetryError if the POST failed.
        """
        data = self._event_data(ctx)
        if data is None:
            return None
        data["event_name"] = API_REQUEST_EVENT
        data["request_id"] = request_id
        data["livemode"] = "true" if livemode else "false"

        try:
            resp = self._post(data)
        except _POST_ERRORS as e:
            raise TelemetryError(f"API request event for {request_id} failed: {e}") from e
        logger.debug("Telemetry API request event %s: HTTP %d", request_id, resp.status)
        return resp

    def _event_data(self, ctx: TelemetryContext) -> dict[str, str] | None:
        """Base form fields for an event, or None if the event is skipped."""
        metadata = get_event_metadata(ctx)
        if metadata is None:
            logger.debug("No event metadata on context, skipping telemetry")
            return None
        if telemetry_opted_out(os.environ.get(OPTOUT_ENV)):
            logger.debug("Telemetry opted out via %s", OPTOUT_ENV)
            return None

        data = {"client_id": CLIENT_ID}
        data.update(metadata.to_form())
        return data

    def _post(self, data: dict[str, str]):
        """POST form data to base_url.

        An HTTP error status still completes the round trip, so its response
        is returned rather than raised.
        """
        req = urllib.request.Request(
            urllib.parse.urlunsplit(self.base_url),
            data=urllib.parse.urlencode(data).encode("utf-8"),
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "User-Agent": data.get("user_agent") or CLIENT_ID,
            },
            method="POST",
        )
        try:
            if self.timeout is None:
                return self.http_client.open(req)
            return self.http_client.open(req, timeout=self.timeout)
        except urllib.error.HTTPError as e:
            return e


class NoOpTelemetryClient:
    """Stands in for the analytics client when telemetry is disabled."""

    def send_event(self, ctx: TelemetryContext, event_name: str, event_value: str) -> None:
        return None

    def send_api_request_event(self, ctx: TelemetryContext, request_id: str, livemode: bool) -> None:
        return None
