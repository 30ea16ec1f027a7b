"""
Fixtures compartidas: stores en memoria, host de imágenes falso y tokens firmados.

Los fakes implementan la misma interfaz que los repositorios Motor, así que se
inyectan tal cual en `PrivilegedStore`, `ScopedStore` y el motor de perfiles.
"""
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import jwt
import pytest

from sfsd_admin.core import rate_limit
from sfsd_admin.core.config import settings
from sfsd_admin.core.exceptions import AssetHostError, StorageError
from sfsd_admin.repositories.stores import PrivilegedStore, ScopedStore

TEST_SECRET = "test-secret"


class FakeProfiles:
    def __init__(self, docs: Optional[Dict[str, Dict[str, Any]]] = None):
        self.docs = {k: dict(v) for k, v in (docs or {}).items()}
        self.updates: List[tuple] = []
        self.reads = 0
        self.fail_update = False

    async def get_profile(self, user_id):
        self.reads += 1
        doc = self.docs.get(user_id)
        if doc is None:
            return None
        return {**doc, "id": user_id}

    async def update_profile(self, user_id, fields):
        if self.fail_update:
            raise StorageError("update failed")
        self.updates.append((user_id, dict(fields)))
        self.docs.setdefault(user_id, {}).update(fields)

    async def delete_profile(self, user_id):
        return 1 if self.docs.pop(user_id, None) is not None else 0


class FakeNotifications:
    def __init__(self):
        self.docs: List[Dict[str, Any]] = []
        self.batches: List[List[Dict[str, Any]]] = []
        self.fail_insert = False
        self._seq = 0

    async def insert_many(self, docs):
        if self.fail_insert:
            raise StorageError("insert failed")
        self.batches.append([dict(d) for d in docs])
        ids = []
        for d in docs:
            self._seq += 1
            data = {"link": None, "is_read": False, "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc), **d}
            data["id"] = f"n{self._seq}"
            self.docs.append(data)
            ids.append(data["id"])
        return ids

    async def list_for_user(self, user_id, *, unread_only=False, limit=50):
        out = [d for d in self.docs if d["user_id"] == user_id and (not unread_only or not d["is_read"])]
        return [dict(d) for d in reversed(out)][:limit]

    async def set_read(self, user_id, notification_id, is_read):
        for d in self.docs:
            if d["id"] == notification_id and d["user_id"] == user_id:
                d["is_read"] = is_read
                return True
        return False

    async def mark_all_read(self, user_id):
        n = 0
        for d in self.docs:
            if d["user_id"] == user_id and not d["is_read"]:
                d["is_read"] = True
                n += 1
        return n

    async def delete_for_user(self, user_id):
        before = len(self.docs)
        self.docs = [d for d in self.docs if d["user_id"] != user_id]
        return before - len(self.docs)


class FakeAccounts:
    def __init__(self, docs: Optional[Dict[str, Dict[str, Any]]] = None):
        self.docs = {k: dict(v) for k, v in (docs or {}).items()}

    async def get_account(self, user_id):
        return self.docs.get(user_id)

    async def delete_account(self, user_id):
        return 1 if self.docs.pop(user_id, None) is not None else 0

    async def set_password_hash(self, user_id, password_hash):
        doc = self.docs.get(user_id)
        if doc is None:
            return False
        doc["password_hash"] = password_hash
        doc["token_version"] = doc.get("token_version", 0) + 1
        return True


class FakeCases:
    def __init__(self, cases=None, evidence=None):
        self.cases = dict(cases or {})
        self.evidence: Dict[str, List[str]] = dict(evidence or {})
        self.deleted: List[str] = []
        self.events: List[str] = []

    async def get_case(self, case_id):
        return self.cases.get(case_id)

    async def list_image_evidence_paths(self, case_id):
        return list(self.evidence.get(case_id, []))

    async def delete_case_cascade(self, case_id):
        self.events.append("delete_records")
        self.deleted.append(case_id)
        self.cases.pop(case_id, None)
        n = len(self.evidence.pop(case_id, []))
        return {"case_evidence": n, "case": 1}


class FakeMaintenance:
    def __init__(self):
        self.budget = []
        self.deleted_budget_ids = []
        self.vehicle_count = 0
        self.action_count = 0
        self.fail = set()
        self.thresholds = {}

    async def stale_budget_requests(self, threshold):
        self.thresholds["budget"] = threshold
        if "budget" in self.fail:
            raise StorageError("budget_request: boom")
        return list(self.budget)

    async def delete_budget_requests(self, ids):
        self.deleted_budget_ids.extend(ids)
        return len(ids)

    async def delete_stale_vehicle_requests(self, threshold):
        self.thresholds["vehicle"] = threshold
        if "vehicle" in self.fail:
            raise StorageError("vehicle_request: boom")
        return self.vehicle_count

    async def delete_old_action_logs(self, threshold):
        self.thresholds["action"] = threshold
        if "action" in self.fail:
            raise StorageError("action_log: boom")
        return self.action_count


class FakeAssetHost:
    def __init__(self, destroy_result="ok"):
        self.destroy_result = destroy_result
        self.destroyed: List[str] = []
        self.batch_deleted: List[List[str]] = []
        self.uploads: List[str] = []
        self.fail_batch = False
        self.events: List[str] = []

    async def destroy(self, public_id):
        self.destroyed.append(public_id)
        return self.destroy_result

    async def delete_resources(self, public_ids):
        if self.fail_batch:
            raise AssetHostError("Cloudinary: boom")
        ids = list(public_ids)
        self.events.append("delete_images")
        self.batch_deleted.append(ids)
        return {p: "deleted" for p in ids}

    async def upload(self, fileobj, kind="evidence"):
        self.uploads.append(kind)
        folder = "avatars" if kind == "avatar" else "evidence"
        return f"https://res.cloudinary.com/demo/image/upload/v1700000000/{folder}/abc123.jpg"


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch):
    monkeypatch.setattr(settings, "jwt_secret", TEST_SECRET)
    monkeypatch.setattr(settings, "jwt_audience", "authenticated")
    monkeypatch.setattr(settings, "cron_secret", "cron-secret")
    rate_limit.reset()
    yield
    rate_limit.reset()


@pytest.fixture
def profiles():
    return FakeProfiles({
        "admin-1": {"system_role": "admin", "faction_rank": "Captain", "division": "Patrol"},
        "exec-1": {"system_role": "user", "faction_rank": "Commander", "division": "Command"},
        "member-1": {"system_role": "user", "faction_rank": "Officer", "division": "Patrol"},
        "pending-1": {"system_role": "pending", "faction_rank": "Officer", "division": "Patrol"},
    })


@pytest.fixture
def notifications():
    return FakeNotifications()


@pytest.fixture
def accounts():
    return FakeAccounts({
        "member-1": {"email": "member@sfsd.test", "token_version": 0},
        "pending-1": {"email": "pending@sfsd.test", "token_version": 0},
    })


@pytest.fixture
def cases():
    return FakeCases(
        cases={
            "case-1": {"_id": "case-1", "owner_id": "member-1", "title": "Robo"},
        },
        evidence={
            "case-1": [
                "https://res.cloudinary.com/demo/image/upload/v1712345678/evidence/photo1.jpg",
                "https://res.cloudinary.com/demo/image/upload/evidence/photo2.png",
                "https://example.com/not-cloudinary.jpg",
            ],
        },
    )


@pytest.fixture
def maintenance():
    return FakeMaintenance()


@pytest.fixture
def asset_host():
    return FakeAssetHost()


@pytest.fixture
def store(profiles, notifications, accounts, cases, maintenance):
    return PrivilegedStore(
        profiles=profiles,
        notifications=notifications,
        accounts=accounts,
        cases=cases,
        maintenance=maintenance,
    )


@pytest.fixture
def scoped_factory(notifications):
    def _make(user_id: str) -> ScopedStore:
        return ScopedStore(notifications, user_id)
    return _make


def make_token(sub: str, *, secret: str = TEST_SECRET, expires_in: int = 300, aud: str = "authenticated") -> str:
    now = int(time.time())
    payload = {"sub": sub, "aud": aud, "iat": now, "exp": now + expires_in, "email": f"{sub}@sfsd.test"}
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_header(sub: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub)}"}
