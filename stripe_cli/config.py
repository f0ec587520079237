"""CLI configuration: the JSON config file plus telemetry environment overrides."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass

from stripe_cli.telemetry.client import OPTOUT_ENV, TIMEOUT_SECONDS, telemetry_opted_out

logger = logging.getLogger(__name__)

TELEMETRY_ENDPOINT = "https://r.stripe.com/0"
TELEMETRY_URL_ENV = "STRIPE_CLI_TELEMETRY_URL"
CONFIG_DIR_ENV = "STRIPE_CONFIG_DIR"


@dataclass
class TelemetryConfig:
    enabled: bool = True
    endpoint: str = TELEMETRY_ENDPOINT
    timeout: float = TIMEOUT_SECONDS
    # Why telemetry is off: "config" or the opt-out env var name. Empty when on.
    disabled_by: str = ""


def get_config_path(environ=None) -> str:
    """Path to config.json, honouring STRIPE_CONFIG_DIR."""
    environ = os.environ if environ is None else environ
    config_dir = environ.get(CONFIG_DIR_ENV) or os.path.join(
        os.path.expanduser("~"), ".config", "stripe"
    )
    return os.path.join(config_dir, "config.json")


def load_config(config_path: str) -> dict:
    """Load config from file, returning empty dict if not found."""
    if not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.debug("Failed to load config %s: %s", config_path, e)
        return {}


def save_config(config_path: str, cfg: dict) -> None:
    """Save config to file."""
    os.makedirs(os.path.dirname(config_path), exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(cfg, f, indent=2)


def load_telemetry_config(config_path: str | None = None, environ=None) -> TelemetryConfig:
    """Resolve telemetry settings. Environment variables win over the file."""
    environ = os.environ if environ is None else environ
    cfg = load_config(config_path or get_config_path(environ))

    disabled_by = ""
    if not cfg.get("telemetry", True):                   # default: on
        disabled_by = "config"
    elif telemetry_opted_out(environ.get(OPTOUT_ENV)):
        disabled_by = OPTOUT_ENV
    endpoint = (
        environ.get(TELEMETRY_URL_ENV)
        or cfg.get("telemetry_url")
        or TELEMETRY_ENDPOINT
    )
    return TelemetryConfig(
        enabled=not disabled_by, endpoint=endpoint, disabled_by=disabled_by,
    )


def set_telemetry_enabled(config_path: str, enabled: bool) -> None:
    """Persist the telemetry on/off switch, keeping other keys."""
    cfg = load_config(config_path)
    cfg["telemetry"] = enabled
    save_config(config_path, cfg)


def ensure_config(config_path: str) -> bool:
    """Create the config file if missing. True when this is the first run.

    A config file that cannot be written still counts as a first run; the
    notice then shows again next time rather than failing the command.
    """
    if os.path.exists(config_path):
        return False
    try:
        save_config(config_path, {})
    except OSError as e:
        logger.debug("Failed to create config %s: %s", config_path, e)
    return True
