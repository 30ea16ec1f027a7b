"""Ejecuta el mantenimiento diario fuera del scheduler (mismo código que /cron/daily-cleanup).

Uso típico:
  PYTHONPATH=. python scripts/run_daily_cleanup.py
  PYTHONPATH=. python scripts/run_daily_cleanup.py --at 2025-03-01T06:00:00Z

Con --at se calculan los umbrales de retención respecto a esa fecha en lugar de ahora.
"""
from __future__ import annotations

import argparse
import asyncio
import json
from datetime import datetime, timezone

from sfsd_admin.core.logging import setup_logging
from sfsd_admin.infrastructure.db.mongo_async import close_async_db, get_async_db
from sfsd_admin.infrastructure.storage.cloudinary_host import CloudinaryAssetHost
from sfsd_admin.repositories.stores import PrivilegedStore
from sfsd_admin.services.maintenance_service import run_daily_cleanup


def _parse_at(value: str) -> datetime:
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


async def _run(at: datetime | None) -> dict:
    store = PrivilegedStore.from_db(get_async_db())
    try:
        return await run_daily_cleanup(store, CloudinaryAssetHost(), now=at)
    finally:
        close_async_db()


def main() -> None:
    ap = argparse.ArgumentParser(description="Mantenimiento diario: purga finanzas, vehículos y action log")
    ap.add_argument("--at", type=_parse_at, default=None, help="Fecha de referencia ISO-8601 (UTC por defecto)")
    args = ap.parse_args()

    setup_logging()
    out = asyncio.run(_run(args.at))
    print(json.dumps(out, indent=2, ensure_ascii=False))
    if not out["success"]:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
