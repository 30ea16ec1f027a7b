"""Persistencia de cuentas de autenticación (`auth_user`).

Sólo las operaciones administrativas que necesita este backend: leer, borrar
y reemplazar el hash de contraseña.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from sfsd_admin.core.exceptions import StorageError
from sfsd_admin.core.time import now_utc
from sfsd_admin.repositories.collections import AUTH_USER


class AccountRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self._coll = db[AUTH_USER]

    async def get_account(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            return await self._coll.find_one({"_id": user_id}, {"password_hash": 0})
        except PyMongoError as e:
            raise StorageError(f"No se pudo leer la cuenta: {e}") from e

    async def delete_account(self, user_id: str) -> int:
        try:
            res = await self._coll.delete_one({"_id": user_id})
        except PyMongoError as e:
            raise StorageError(f"No se pudo borrar la cuenta: {e}") from e
        return res.deleted_count

    async def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        """Guarda el nuevo hash e incrementa token_version (invalida sesiones previas)."""
        try:
            res = await self._coll.update_one(
                {"_id": user_id},
                {"$set": {"password_hash": password_hash, "updated_at": now_utc()}, "$inc": {"token_version": 1}},
            )
        except PyMongoError as e:
            raise StorageError(f"No se pudo actualizar la contraseña: {e}") from e
        return res.matched_count > 0
