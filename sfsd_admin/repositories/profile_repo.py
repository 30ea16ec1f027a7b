"""Repositorio de la colección `profile` (Motor).

El `_id` del perfil es el subject del token de identidad (string).
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from sfsd_admin.core.exceptions import NotFound, StorageError
from sfsd_admin.core.time import now_utc
from sfsd_admin.repositories.collections import PROFILE


def _out(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if doc is None:
        return None
    data = dict(doc)
    data["id"] = str(data.pop("_id"))
    return data


class ProfileRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self._coll = db[PROFILE]

    async def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Devuelve el perfil (con `id` en lugar de `_id`) o None si no existe."""
        try:
            return _out(await self._coll.find_one({"_id": user_id}))
        except PyMongoError as e:
            raise StorageError(f"No se pudo leer el perfil: {e}") from e

    async def update_profile(self, user_id: str, fields: Dict[str, Any]) -> None:
        """Aplica un `$set` parcial. Sella `updated_at`."""
        data = dict(fields)
        data["updated_at"] = now_utc()
        try:
            res = await self._coll.update_one({"_id": user_id}, {"$set": data})
        except PyMongoError as e:
            raise StorageError(f"No se pudo actualizar el perfil: {e}") from e
        if res.matched_count == 0:
            raise NotFound("Perfil no encontrado")

    async def delete_profile(self, user_id: str) -> int:
        try:
            res = await self._coll.delete_one({"_id": user_id})
        except PyMongoError as e:
            raise StorageError(f"No se pudo borrar el perfil: {e}") from e
        return res.deleted_count
