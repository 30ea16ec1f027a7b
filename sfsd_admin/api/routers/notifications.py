"""
Endpoints de la bandeja de notificaciones del usuario autenticado.

Todas las consultas pasan por `ScopedStore`: nunca tocan notificaciones ajenas.
"""
from fastapi import APIRouter, Depends, Query

from sfsd_admin.api.deps import get_scoped_store
from sfsd_admin.api.schemas.notification import (
    CountOut,
    NotificationListOut,
    NotificationOut,
    SetReadPayload,
)
from sfsd_admin.repositories.stores import ScopedStore
from sfsd_admin.services import notification_service as service

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListOut, summary="Listar mis notificaciones")
async def list_notifications(
    unread_only: bool = Query(default=False),
    limit: int = Query(default=50, ge=1, le=200),
    store: ScopedStore = Depends(get_scoped_store),
) -> NotificationListOut:
    items = await service.list_my_notifications(store, unread_only=unread_only, limit=limit)
    out = [NotificationOut(**i) for i in items]
    return NotificationListOut(notifications=out, unread=sum(1 for n in out if not n.is_read))


@router.patch("/{notification_id}", response_model=CountOut, summary="Marcar como leída/no leída")
async def set_read(
    notification_id: str,
    payload: SetReadPayload,
    store: ScopedStore = Depends(get_scoped_store),
) -> CountOut:
    await service.set_read(store, notification_id, payload.is_read)
    return CountOut(count=1)


@router.post("/read-all", response_model=CountOut, summary="Marcar todas como leídas")
async def read_all(store: ScopedStore = Depends(get_scoped_store)) -> CountOut:
    return CountOut(count=await service.mark_all_read(store))


@router.delete("", response_model=CountOut, summary="Vaciar bandeja")
async def clear(store: ScopedStore = Depends(get_scoped_store)) -> CountOut:
    return CountOut(count=await service.clear_all(store))
