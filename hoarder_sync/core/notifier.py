"""User notifications for Hoarder Sync.

Sends notifications through an external command (a desktop notifier,
a chat bot script, ...). Degrades silently when the command is missing,
so a headless daemon works without any setup.
"""

import logging
import os
import subprocess
from typing import Literal

logger = logging.getLogger(__name__)

DEFAULT_NOTIFY_CMD = os.path.expanduser("~/.local/bin/notify")

NOTIFY_TIMEOUT_SECONDS = 10

NotifyType = Literal["info", "done", "error"]


def get_notify_command() -> str:
    """Get path to the notification command.

    Uses HOARDER_NOTIFY_CMD if set, otherwise ~/.local/bin/notify.
    """
    return os.environ.get("HOARDER_NOTIFY_CMD", DEFAULT_NOTIFY_CMD)


def notify(message: str, msg_type: NotifyType = "info") -> bool:
    """Send a notification via the external command.

    The command is invoked as ``<cmd> <message> <msg_type>``.

    Args:
        message: The message to show.
        msg_type: "info", "done" or "error".

    Returns:
        True if the command ran and exited with 0, False otherwise.
    """
    cmd_path = get_notify_command()

    if not os.path.exists(cmd_path):
        logger.debug("Notify command not found at %s, skipping notification", cmd_path)
        return False

    try:
        result = subprocess.run(
            [cmd_path, message, msg_type],
            timeout=NOTIFY_TIMEOUT_SECONDS,
            capture_output=True,
            text=True,
        )
    except subprocess.TimeoutExpired:
        logger.warning("Notify command timed out after %ds", NOTIFY_TIMEOUT_SECONDS)
        return False
    except OSError as e:
        logger.warning("Failed to send notification: %s", e)
        return False

    if result.returncode != 0:
        logger.warning(
            "Notify command failed with code %d: %s",
            result.returncode,
            result.stderr[:100] if result.stderr else "no output",
        )
        return False

    logger.debug("Notification sent: %s", message[:50])
    return True


def notify_sync_result(success: bool, message: str) -> bool:
    """Notify the outcome of a sync pass.

    One notification per pass, never one per bookmark.
    """
    return notify(message, "done" if success else "error")
