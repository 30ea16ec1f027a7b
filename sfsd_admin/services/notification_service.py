"""
Bandeja de notificaciones del usuario autenticado: capa delgada sobre `ScopedStore`.
"""
from typing import Any, Dict, List

from sfsd_admin.core.exceptions import NotFound
from sfsd_admin.repositories.stores import ScopedStore


async def list_my_notifications(store: ScopedStore, unread_only: bool = False, limit: int = 50) -> List[Dict[str, Any]]:
    return await store.list_notifications(unread_only=unread_only, limit=limit)


async def set_read(store: ScopedStore, notification_id: str, is_read: bool) -> None:
    if not await store.set_notification_read(notification_id, is_read):
        raise NotFound("Notificación no encontrada")


async def mark_all_read(store: ScopedStore) -> int:
    return await store.mark_all_read()


async def clear_all(store: ScopedStore) -> int:
    return await store.clear_notifications()
