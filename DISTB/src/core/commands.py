"""Administrative ``/distb`` command handling."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from DISTB.config import ConfigError, ConfigStore

logger = logging.getLogger(__name__)

COMMAND_NAME = "distb"
MESSAGE_PREFIX = "[DistanceBeam]"


def handle_command(
    store: ConfigStore,
    send_message: Callable[[str], None],
    command: str,
    args: Sequence[str],
) -> bool:
    """Return True when the command was handled; False lets the host print usage."""
    if command.lower() != COMMAND_NAME:
        return False
    if len(args) != 1 or args[0].lower() != "reload":
        return False

    try:
        store.reload()
    except ConfigError as exc:
        logger.error("Config reload failed: %s", exc)
        send_message(f"{MESSAGE_PREFIX} Reload failed: {exc}")
        return True

    send_message(f"{MESSAGE_PREFIX} Configuration reloaded.")
    return True
