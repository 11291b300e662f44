"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List, Optional

from .duration import DurationParseError, parse_interval

# Below this, a full subnet sweep rarely finishes before the next firing
SHORT_INTERVAL_SECONDS = 60


def check_for_warnings(config_dict: Dict[str, Any], api_address: Optional[str] = None) -> List[str]:
    """
    Inspect raw configuration for settings that are valid but probably unintended.

    Args:
        config_dict: Raw configuration dictionary from the YAML file
        api_address: Effective API address, if overridden from the environment

    Returns:
        List of warning messages
    """
    warning_messages = []

    interval = config_dict.get("interval", "15m")
    try:
        seconds = parse_interval(interval)
    except DurationParseError:
        # Reported as an error by model validation
        seconds = None
    if seconds is not None and 0 < seconds < SHORT_INTERVAL_SECONDS:
        warning_messages.append(
            f"Short interval ({interval}): runs still in progress when the next one is due are skipped"
        )

    address = api_address or config_dict.get("api_address")
    if isinstance(address, str) and address.strip().lower().startswith("http://"):
        warning_messages.append(
            f"api_address {address.strip()} is not HTTPS; the API token will be sent in clear text"
        )

    subnet = config_dict.get("subnet")
    if subnet is None or (isinstance(subnet, str) and not subnet.strip()):
        warning_messages.append("No subnet configured; the executor will auto-detect the local subnet")

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit each message through the ``warnings`` module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
