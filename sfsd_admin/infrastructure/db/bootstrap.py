"""
Bootstrap de la base Mongo: define y aplica validadores (JSON Schema) e índices.
Se ejecuta al inicio de la app para asegurar colecciones mínimas y consistencia.
No tumba la app si algo falla; deja warnings en casos no críticos.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from pymongo.errors import PyMongoError

from sfsd_admin.infrastructure.db.mongo import get_db
from sfsd_admin.repositories.collections import (
    ACTION_LOG,
    AUTH_USER,
    BUDGET_REQUEST,
    CASE,
    CASE_EVIDENCE,
    NOTIFICATION,
    PROFILE,
    VEHICLE_REQUEST,
)

_log = logging.getLogger("sfsd.mongo.bootstrap")


def _collmod_or_create(name: str, validator: Dict[str, Any] | None) -> None:
    db = get_db()
    try:
        if name not in db.list_collection_names():
            if validator:
                db.create_collection(name, validator={"$jsonSchema": validator})
            else:
                db.create_collection(name)
        elif validator:
            db.command({
                "collMod": name,
                "validator": {"$jsonSchema": validator},
                "validationLevel": "moderate",
            })
    except PyMongoError as e:
        # No aborta el arranque; solo deja sin validator estricto.
        _log.warning("No se pudo aplicar validator en '%s': %s", name, e)


def _ensure_indexes(name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = get_db()[name]
    for ix in indexes:
        ix = dict(ix)
        keys = ix.pop("keys")
        try:
            coll.create_index(keys, **ix)
        except PyMongoError as e:
            _log.warning("No se pudo crear índice en '%s' (%s): %s", name, keys, e)


def ensure_collections() -> None:
    """
    Garantiza colecciones, validadores e índices mínimos.
    """
    # Profile: _id = subject del token de identidad
    profile_validator = {
        "bsonType": "object",
        "required": ["system_role"],
        "properties": {
            "system_role": {"bsonType": "string", "minLength": 1},
            "faction_rank": {"bsonType": ["string", "null"]},
            "division": {"bsonType": ["string", "null"]},
            "division_rank": {"bsonType": ["string", "null"]},
            "qualifications": {"bsonType": ["array", "null"]},
            "is_bureau_manager": {"bsonType": ["bool", "null"]},
            "is_bureau_commander": {"bsonType": ["bool", "null"]},
            "commanded_divisions": {"bsonType": ["array", "null"], "items": {"bsonType": "string"}},
            "last_promotion_date": {"bsonType": ["date", "null"]},
        },
        "additionalProperties": True,
    }
    _collmod_or_create(PROFILE, profile_validator)
    _ensure_indexes(
        PROFILE,
        [
            {"keys": [("system_role", 1)], "name": "ix_profile_system_role"},
            {"keys": [("division", 1)], "name": "ix_profile_division"},
        ],
    )

    notification_validator = {
        "bsonType": "object",
        "required": ["user_id", "title", "message", "type", "is_read", "created_at"],
        "properties": {
            "user_id": {"bsonType": "string", "minLength": 1},
            "title": {"bsonType": "string"},
            "message": {"bsonType": "string"},
            "type": {"bsonType": "string", "enum": ["info", "success", "warning", "alert"]},
            "link": {"bsonType": ["string", "null"]},
            "is_read": {"bsonType": "bool"},
            "created_at": {"bsonType": "date"},
        },
        "additionalProperties": True,
    }
    _collmod_or_create(NOTIFICATION, notification_validator)
    _ensure_indexes(
        NOTIFICATION,
        [
            {"keys": [("user_id", 1), ("created_at", -1)], "name": "ix_notification_user_created"},
            {"keys": [("user_id", 1), ("is_read", 1)], "name": "ix_notification_user_unread"},
        ],
    )

    _collmod_or_create(AUTH_USER, None)
    _ensure_indexes(AUTH_USER, [{"keys": [("email", 1)], "unique": True, "sparse": True, "name": "uniq_email"}])

    _collmod_or_create(CASE, None)
    _ensure_indexes(CASE, [{"keys": [("owner_id", 1)], "name": "ix_case_owner"}])
    _ensure_indexes(
        CASE_EVIDENCE,
        [{"keys": [("case_id", 1), ("file_type", 1)], "name": "ix_evidence_case_type"}],
    )

    # Colecciones purgadas por el mantenimiento diario
    for name in (BUDGET_REQUEST, VEHICLE_REQUEST, ACTION_LOG):
        _ensure_indexes(name, [{"keys": [("created_at", 1)], "name": f"ix_{name}_created"}])
