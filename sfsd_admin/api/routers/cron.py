"""Tareas programadas (invocadas por el scheduler con CRON_SECRET)."""
from fastapi import APIRouter, Depends

from sfsd_admin.api.deps import get_asset_host, get_privileged_store, verify_cron_secret
from sfsd_admin.api.schemas.admin import CleanupOut
from sfsd_admin.infrastructure.storage.cloudinary_host import CloudinaryAssetHost
from sfsd_admin.repositories.stores import PrivilegedStore
from sfsd_admin.services.maintenance_service import run_daily_cleanup

router = APIRouter(prefix="/cron", tags=["Cron"], dependencies=[Depends(verify_cron_secret)])


@router.get("/daily-cleanup", response_model=CleanupOut, summary="Mantenimiento diario")
async def daily_cleanup(
    store: PrivilegedStore = Depends(get_privileged_store),
    host: CloudinaryAssetHost = Depends(get_asset_host),
) -> CleanupOut:
    return CleanupOut(**await run_daily_cleanup(store, host))
