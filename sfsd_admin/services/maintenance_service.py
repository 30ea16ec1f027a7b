"""
Mantenimiento diario (cron): purga de solicitudes procesadas y del action log.

Cada sección es independiente: si una falla se registra el error y las demás
siguen ejecutándose.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sfsd_admin.core.config import settings
from sfsd_admin.core.exceptions import AdminError
from sfsd_admin.core.time import days_ago, iso_z, now_utc
from sfsd_admin.infrastructure.storage.cloudinary_host import CloudinaryAssetHost, public_id_from_url
from sfsd_admin.repositories.stores import PrivilegedStore

_log = logging.getLogger("sfsd.maintenance")


async def _purge_finance(store: PrivilegedStore, host: CloudinaryAssetHost, now: datetime) -> int:
    stale = await store.maintenance.stale_budget_requests(days_ago(settings.finance_retention_days, now))
    if not stale:
        return 0
    proofs = [public_id_from_url(d.get("proof_image_path")) for d in stale]
    proofs = [p for p in proofs if p]
    if proofs:
        await host.delete_resources(proofs)
    return await store.maintenance.delete_budget_requests([d["_id"] for d in stale])


async def run_daily_cleanup(
    store: PrivilegedStore,
    host: CloudinaryAssetHost,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    now = now or now_utc()
    results: Dict[str, Any] = {
        "financeDeleted": 0,
        "vehicleDeleted": 0,
        "actionsDeleted": 0,
    }
    errors: List[str] = []
    _log.info("Mantenimiento diario: inicio")

    try:
        results["financeDeleted"] = await _purge_finance(store, host, now)
    except AdminError as e:
        _log.error("Limpieza de finanzas falló: %s", e.message)
        errors.append(f"Finance error: {e.message}")
    except Exception as e:
        _log.exception("Limpieza de finanzas falló: %s", e)
        errors.append(f"Finance error: {e}")

    try:
        results["vehicleDeleted"] = await store.maintenance.delete_stale_vehicle_requests(
            days_ago(settings.vehicle_retention_days, now)
        )
    except AdminError as e:
        _log.error("Limpieza de vehículos falló: %s", e.message)
        errors.append(f"Vehicle error: {e.message}")
    except Exception as e:
        _log.exception("Limpieza de vehículos falló: %s", e)
        errors.append(f"Vehicle error: {e}")

    try:
        results["actionsDeleted"] = await store.maintenance.delete_old_action_logs(
            days_ago(settings.action_log_retention_days, now)
        )
    except AdminError as e:
        _log.error("Limpieza del action log falló: %s", e.message)
        errors.append(f"Action log error: {e.message}")
    except Exception as e:
        _log.exception("Limpieza del action log falló: %s", e)
        errors.append(f"Action log error: {e}")

    results["errors"] = errors
    _log.info("Mantenimiento diario: fin %s", results)
    return {
        "success": not errors,
        "message": "Mantenimiento ejecutado.",
        "timestamp": iso_z(now),
        "results": results,
    }
