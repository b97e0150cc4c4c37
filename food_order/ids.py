"""Identifier factories for cart lines and orders."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4


def new_line_id(menu_item_id: str) -> str:
    return f"{menu_item_id}-{uuid4().hex[:12]}"


def new_order_id(created_at: datetime) -> str:
    """Order ids sort by creation time: ``ORDER-<epoch ms>-<suffix>``."""
    millis = int(created_at.timestamp() * 1000)
    return f"ORDER-{millis}-{uuid4().hex[:6]}"
