"""
Helpers de fecha/hora. Todo el backend trabaja en UTC (timezone-aware).
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def days_ago(days: int, now: datetime | None = None) -> datetime:
    """Umbral `now - days` (aware UTC), usado por las purgas de mantenimiento."""
    return (now or now_utc()) - timedelta(days=days)


def iso_z(dt: datetime) -> str:
    """Serializa a ISO-8601 UTC con sufijo Z (formato de los timestamps expuestos)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
