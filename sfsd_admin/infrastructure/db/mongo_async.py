"""Cliente MongoDB asíncrono (Motor).

Es el cliente de las rutas HTTP: el motor de perfiles, la bandeja de
notificaciones, el borrado de casos y el mantenimiento diario.
"""
from __future__ import annotations

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from sfsd_admin.core.config import settings
from sfsd_admin.infrastructure.db.mongo import client_kwargs

_log = logging.getLogger("sfsd.mongo.async")

_aclient: Optional[AsyncIOMotorClient] = None
_adb: Optional[AsyncIOMotorDatabase] = None


def get_async_db() -> AsyncIOMotorDatabase:
    """Devuelve la DB asíncrona; inicializa lazy un único cliente/bd."""
    global _aclient, _adb
    if _adb is None:
        uri = settings.mongo_uri
        _aclient = _aclient or AsyncIOMotorClient(uri, **client_kwargs(uri))
        _adb = _aclient[settings.mongo_db]
        _log.info("Motor listo (db async inicializada)")
    return _adb


def close_async_db() -> None:
    global _aclient, _adb
    if _aclient is not None:
        _aclient.close()
    _aclient = None
    _adb = None
