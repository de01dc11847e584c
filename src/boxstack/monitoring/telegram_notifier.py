"""Lightweight Telegram notification for stacking runs.

Sends plain-text messages to a Telegram channel via the Bot API for:
- Run start notifications
- Final results summary
- Errors

No retry logic: notifications are non-critical.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"


async def send_telegram(
    message: str,
    chat_id: str | None = None,
    token: str | None = None,
) -> bool:
    """Send a plain-text message to a Telegram channel.

    Args:
        message: Text to send.
        chat_id: Telegram chat ID. Defaults to TELEGRAM_CHAT_ID env var.
        token: Bot token. Defaults to TELEGRAM_BOT_TOKEN env var.

    Returns:
        True if message was sent successfully, False otherwise.
    """
    token = token or os.environ.get("TELEGRAM_BOT_TOKEN", "")
    if not token:
        return False

    chat_id = chat_id or os.environ.get("TELEGRAM_CHAT_ID", "")
    if not chat_id:
        return False

    url = TELEGRAM_API.format(token=token)
    payload = {"chat_id": chat_id, "text": message}

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.post(url, json=payload)
            data = resp.json()
            return bool(data.get("ok", False))
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Telegram notification failed: %s", e)
        return False


def format_search_start(
    input_path: str,
    original_boxes: int,
    initial_temperature: float,
    cooling_rate: float,
    iteration_budget: int,
) -> str:
    """Format run start notification message.

    ``iteration_budget`` is taken from the config rather than recomputed,
    so the message matches the number of iterations actually run.

    Example:
        >>> print(format_search_start("boxes.txt", 3, 1000, 1, 1000))
        Stacking Started
        Input: boxes.txt (3 boxes)
        Schedule: T=1000, cooling 1 (1000 iterations)
    """
    return (
        f"Stacking Started\n"
        f"Input: {input_path} ({original_boxes} boxes)\n"
        f"Schedule: T={initial_temperature:g}, cooling {cooling_rate:g} "
        f"({iteration_budget} iterations)"
    )


def format_search_complete(
    initial_height: int,
    final_height: int,
    final_size: int,
    runtime_seconds: float,
) -> str:
    """Format final run summary.

    Example:
        >>> print(format_search_complete(13, 16, 3, 0.5))
        Stacking Complete
        Height: 13 -> 16 (+3)
        Boxes: 3
        Runtime: 0.5s
    """
    return (
        f"Stacking Complete\n"
        f"Height: {initial_height} -> {final_height} ({final_height - initial_height:+d})\n"
        f"Boxes: {final_size}\n"
        f"Runtime: {runtime_seconds:.1f}s"
    )


def format_error(error_type: str, error_message: str, context: dict[str, Any] | None = None) -> str:
    """Format error notification message.

    Example:
        >>> print(format_error("FileNotFoundError", "boxes.txt missing", {"seed": 1}))
        Error: FileNotFoundError
        boxes.txt missing
        Context: seed=1
    """
    lines = [
        f"Error: {error_type}",
        error_message,
    ]
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        lines.append(f"Context: {ctx_str}")
    return "\n".join(lines)
