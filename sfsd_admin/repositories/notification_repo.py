"""Repositorio de la colección `notification` (Motor).

Las notificaciones se crean una sola vez (append-only para el backend); el
destinatario puede marcarlas como leídas o vaciar su bandeja.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from sfsd_admin.core.exceptions import StorageError
from sfsd_admin.core.time import now_utc
from sfsd_admin.repositories.collections import NOTIFICATION


def _oid(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def _out(doc: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(doc)
    data["id"] = str(data.pop("_id"))
    return data


class NotificationRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self._coll = db[NOTIFICATION]

    async def insert_many(self, docs: List[Dict[str, Any]]) -> List[str]:
        """Inserta un lote con defaults (`is_read=False`, `created_at`) y devuelve los ids."""
        if not docs:
            return []
        now = now_utc()
        batch = []
        for doc in docs:
            data = dict(doc)
            data.setdefault("link", None)
            data.setdefault("is_read", False)
            data.setdefault("created_at", now)
            batch.append(data)
        try:
            res = await self._coll.insert_many(batch, ordered=True)
        except PyMongoError as e:
            raise StorageError(f"No se pudieron crear las notificaciones: {e}") from e
        return [str(i) for i in res.inserted_ids]

    async def list_for_user(self, user_id: str, *, unread_only: bool = False, limit: int = 50) -> List[Dict[str, Any]]:
        filtro: Dict[str, Any] = {"user_id": user_id}
        if unread_only:
            filtro["is_read"] = False
        try:
            cur = self._coll.find(filtro).sort("created_at", -1).limit(int(limit))
            return [_out(d) async for d in cur]
        except PyMongoError as e:
            raise StorageError(f"No se pudieron listar las notificaciones: {e}") from e

    async def set_read(self, user_id: str, notification_id: str, is_read: bool) -> bool:
        """Cambia `is_read` de una notificación del usuario. False si no existe (o no es suya)."""
        oid = _oid(notification_id)
        if oid is None:
            return False
        try:
            res = await self._coll.update_one({"_id": oid, "user_id": user_id}, {"$set": {"is_read": bool(is_read)}})
        except PyMongoError as e:
            raise StorageError(f"No se pudo actualizar la notificación: {e}") from e
        return res.matched_count > 0

    async def mark_all_read(self, user_id: str) -> int:
        try:
            res = await self._coll.update_many({"user_id": user_id, "is_read": False}, {"$set": {"is_read": True}})
        except PyMongoError as e:
            raise StorageError(f"No se pudieron marcar las notificaciones: {e}") from e
        return res.modified_count

    async def delete_for_user(self, user_id: str) -> int:
        try:
            res = await self._coll.delete_many({"user_id": user_id})
        except PyMongoError as e:
            raise StorageError(f"No se pudieron borrar las notificaciones: {e}") from e
        return res.deleted_count
