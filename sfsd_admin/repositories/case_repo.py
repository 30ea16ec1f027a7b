"""Repositorio de casos (`case`) y sus colecciones dependientes."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from sfsd_admin.core.exceptions import StorageError
from sfsd_admin.repositories.collections import CASE, CASE_DEPENDENTS, CASE_EVIDENCE


class CaseRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db

    async def get_case(self, case_id: str) -> Optional[Dict[str, Any]]:
        try:
            return await self._db[CASE].find_one({"_id": case_id}, {"owner_id": 1, "title": 1})
        except PyMongoError as e:
            raise StorageError(f"No se pudo leer el caso: {e}") from e

    async def list_image_evidence_paths(self, case_id: str) -> List[str]:
        """URLs (`file_path`) de las evidencias de tipo imagen del caso."""
        try:
            cur = self._db[CASE_EVIDENCE].find({"case_id": case_id, "file_type": "image"}, {"file_path": 1})
            return [d["file_path"] async for d in cur if d.get("file_path")]
        except PyMongoError as e:
            raise StorageError(f"No se pudieron leer las evidencias: {e}") from e

    async def delete_case_cascade(self, case_id: str) -> Dict[str, int]:
        """Borra dependientes y luego el caso. Devuelve conteos por colección."""
        counts: Dict[str, int] = {}
        try:
            for name in CASE_DEPENDENTS:
                res = await self._db[name].delete_many({"case_id": case_id})
                counts[name] = res.deleted_count
            res = await self._db[CASE].delete_one({"_id": case_id})
            counts[CASE] = res.deleted_count
        except PyMongoError as e:
            raise StorageError(f"No se pudo borrar el caso: {e}") from e
        return counts
