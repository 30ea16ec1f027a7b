"""
Handles de acceso a la base.

- `PrivilegedStore`: acceso sin restricción de fila (operaciones administrativas
  sobre cualquier usuario). Sólo se obtiene vía dependencias de rutas admin.
- `ScopedStore`: toda consulta va filtrada por el id del llamador; es lo que
  usan las rutas de "mis datos" (bandeja de notificaciones).

Ambos se inyectan (FastAPI Depends) para que los tests puedan sustituirlos.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase

from sfsd_admin.repositories.account_repo import AccountRepository
from sfsd_admin.repositories.case_repo import CaseRepository
from sfsd_admin.repositories.maintenance_repo import MaintenanceRepository
from sfsd_admin.repositories.notification_repo import NotificationRepository
from sfsd_admin.repositories.profile_repo import ProfileRepository


@dataclass
class PrivilegedStore:
    profiles: ProfileRepository
    notifications: NotificationRepository
    accounts: AccountRepository
    cases: CaseRepository
    maintenance: MaintenanceRepository

    @classmethod
    def from_db(cls, db: AsyncIOMotorDatabase) -> "PrivilegedStore":
        return cls(
            profiles=ProfileRepository(db),
            notifications=NotificationRepository(db),
            accounts=AccountRepository(db),
            cases=CaseRepository(db),
            maintenance=MaintenanceRepository(db),
        )


class ScopedStore:
    """Vista restringida al usuario `user_id`."""

    def __init__(self, notifications: NotificationRepository, user_id: str):
        if not user_id:
            raise ValueError("ScopedStore requiere user_id")
        self.user_id = user_id
        self._notifications = notifications

    @classmethod
    def from_db(cls, db: AsyncIOMotorDatabase, user_id: str) -> "ScopedStore":
        return cls(NotificationRepository(db), user_id)

    async def list_notifications(self, *, unread_only: bool = False, limit: int = 50) -> List[Dict[str, Any]]:
        return await self._notifications.list_for_user(self.user_id, unread_only=unread_only, limit=limit)

    async def set_notification_read(self, notification_id: str, is_read: bool) -> bool:
        return await self._notifications.set_read(self.user_id, notification_id, is_read)

    async def mark_all_read(self) -> int:
        return await self._notifications.mark_all_read(self.user_id)

    async def clear_notifications(self) -> int:
        return await self._notifications.delete_for_user(self.user_id)
