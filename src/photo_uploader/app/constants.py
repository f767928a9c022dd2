"""Shared UI constants for the Dash experience."""

from __future__ import annotations

from typing import Dict

from ..client.messages import MessageMode

SESSION_LIMIT = 200
"""Page loads kept in memory before the oldest selection is torn down."""

POLL_INTERVAL_MS = 250

MESSAGE_CLASSES: Dict[MessageMode, str] = {
    MessageMode.INFO: "msg",
    MessageMode.SUCCESS: "msg ok",
    MessageMode.ERROR: "msg err",
}

ACCEPTED_TYPES = "image/*"
