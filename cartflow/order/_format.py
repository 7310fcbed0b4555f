from __future__ import annotations

from datetime import datetime, timedelta

from cartflow._types import OrderId


def format_invoice_id(order_id: OrderId, created_at: datetime) -> str:
    """``INV/20240105/000042``"""
    return f"INV/{created_at:%Y%m%d}/{order_id:06d}"


def format_time_left(left: timedelta) -> str:
    """Payment countdown, ``HH:MM:SS``."""
    seconds = max(int(left.total_seconds()), 0)
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


__all__ = ("format_invoice_id", "format_time_left")
