"""Consultas de purga para el mantenimiento diario (solicitudes y action log)."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from sfsd_admin.core.exceptions import StorageError
from sfsd_admin.repositories.collections import ACTION_LOG, BUDGET_REQUEST, VEHICLE_REQUEST


class MaintenanceRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db

    async def stale_budget_requests(self, threshold: datetime) -> List[Dict[str, Any]]:
        """Solicitudes de presupuesto ya procesadas (no `pending`) anteriores al umbral."""
        filtro = {"status": {"$ne": "pending"}, "created_at": {"$lt": threshold}}
        try:
            cur = self._db[BUDGET_REQUEST].find(filtro, {"proof_image_path": 1})
            return [d async for d in cur]
        except PyMongoError as e:
            raise StorageError(f"budget_request: {e}") from e

    async def delete_budget_requests(self, ids: List[Any]) -> int:
        if not ids:
            return 0
        try:
            res = await self._db[BUDGET_REQUEST].delete_many({"_id": {"$in": list(ids)}})
        except PyMongoError as e:
            raise StorageError(f"budget_request: {e}") from e
        return res.deleted_count

    async def delete_stale_vehicle_requests(self, threshold: datetime) -> int:
        try:
            res = await self._db[VEHICLE_REQUEST].delete_many(
                {"status": {"$ne": "pending"}, "created_at": {"$lt": threshold}}
            )
        except PyMongoError as e:
            raise StorageError(f"vehicle_request: {e}") from e
        return res.deleted_count

    async def delete_old_action_logs(self, threshold: datetime) -> int:
        try:
            res = await self._db[ACTION_LOG].delete_many({"created_at": {"$lt": threshold}})
        except PyMongoError as e:
            raise StorageError(f"action_log: {e}") from e
        return res.deleted_count
