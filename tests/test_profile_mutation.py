from datetime import datetime, timezone

import pytest

from sfsd_admin.core.exceptions import InvalidArgument, NotFound, StorageError
from sfsd_admin.services.profile_mutation import (
    ProfileChanges,
    ProfileMutationEngine,
    plan_profile_mutation,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _plan(pre, changes):
    return plan_profile_mutation({"id": "u1", **pre}, changes, now=NOW)


def _engine(profiles, notifications):
    return ProfileMutationEngine(profiles, notifications, clock=lambda: NOW)


# ---- planner (puro) ----

def test_auxiliary_fields_never_notify():
    plan = _plan(
        {"system_role": "pending", "division": "Patrol", "faction_rank": "Officer"},
        {
            "division_rank": "Lead",
            "qualifications": ["SWAT", "K9"],
            "is_bureau_manager": True,
            "is_bureau_commander": False,
            "commanded_divisions": ["Patrol"],
        },
    )
    assert plan.notifications == []
    assert plan.updates["qualifications"] == ["SWAT", "K9"]
    assert "last_promotion_date" not in plan.updates


def test_pending_to_user_stages_one_approval_even_with_other_changes():
    plan = _plan(
        {"system_role": "pending", "division": "Patrol", "faction_rank": "Officer"},
        {"system_role": "user", "division": "Traffic", "faction_rank": "Sergeant"},
    )
    titles = [n["title"] for n in plan.notifications]
    assert titles.count("Cuenta aprobada") == 1
    assert len(plan.notifications) == 3


@pytest.mark.parametrize("pre,new", [("user", "user"), ("user", "admin"), ("admin", "user"), ("pending", "pending"), ("pending", "admin")])
def test_no_approval_outside_pending_to_user(pre, new):
    plan = _plan({"system_role": pre}, {"system_role": new})
    assert plan.notifications == []
    assert plan.updates == {"system_role": new}


def test_division_change_names_new_division():
    plan = _plan({"division": "Patrol"}, {"division": "Detectives"})
    assert len(plan.notifications) == 1
    note = plan.notifications[0]
    assert note["title"] == "Traslado de división"
    assert note["type"] == "info"
    assert "Detectives" in note["message"]
    assert note["link"] == "/profile"
    assert note["user_id"] == "u1"


def test_division_from_absent_to_value_notifies():
    plan = _plan({}, {"division": "Patrol"})
    assert [n["title"] for n in plan.notifications] == ["Traslado de división"]


def test_same_division_does_not_notify():
    plan = _plan({"division": "Patrol"}, {"division": "Patrol"})
    assert plan.notifications == []
    assert plan.updates == {"division": "Patrol"}


def test_rank_change_stamps_promotion_date_and_notifies():
    plan = _plan({"faction_rank": "Officer"}, {"faction_rank": "Sergeant"})
    assert plan.updates == {"faction_rank": "Sergeant", "last_promotion_date": NOW}
    assert len(plan.notifications) == 1
    assert plan.notifications[0]["title"] == "Cambio de rango"
    assert "Sergeant" in plan.notifications[0]["message"]


def test_same_rank_neither_stamps_nor_notifies():
    plan = _plan({"faction_rank": "Officer"}, {"faction_rank": "Officer"})
    assert plan.updates == {"faction_rank": "Officer"}
    assert plan.notifications == []


def test_explicit_null_is_written_absent_is_not():
    changes = ProfileChanges.model_validate({"division_rank": None})
    plan = _plan({"division_rank": "Lead"}, changes)
    assert plan.updates == {"division_rank": None}

    plan = _plan({"division_rank": "Lead"}, ProfileChanges())
    assert plan.updates == {}


def test_unknown_fields_are_ignored():
    plan = _plan({}, {"email": "x@y.z", "qualifications": []})
    assert plan.updates == {"qualifications": []}


def test_pre_image_is_not_mutated():
    pre = {"id": "u1", "faction_rank": "Officer"}
    plan_profile_mutation(pre, {"faction_rank": "Sergeant"}, now=NOW)
    assert pre == {"id": "u1", "faction_rank": "Officer"}


# ---- engine (con stores en memoria) ----

async def test_scenario_approval_only(profiles, notifications):
    profiles.docs["t1"] = {"system_role": "pending", "division": "Patrol", "faction_rank": "Officer"}
    result = await _engine(profiles, notifications).apply(
        "t1", {"system_role": "user", "division": "Patrol", "faction_rank": "Officer"}
    )

    assert profiles.docs["t1"]["system_role"] == "user"
    assert "last_promotion_date" not in profiles.docs["t1"]
    assert len(notifications.batches) == 1
    batch = notifications.batches[0]
    assert [n["title"] for n in batch] == ["Cuenta aprobada"]
    assert batch[0]["type"] == "success"
    assert result.notifications_created == 1
    assert result.notification_error is None


async def test_scenario_rank_change(profiles, notifications):
    profiles.docs["t2"] = {"faction_rank": "Officer"}
    result = await _engine(profiles, notifications).apply("t2", {"faction_rank": "Sergeant"})

    assert profiles.docs["t2"]["faction_rank"] == "Sergeant"
    assert profiles.docs["t2"]["last_promotion_date"] == NOW
    assert [n["title"] for n in notifications.batches[0]] == ["Cambio de rango"]
    assert set(result.updated_fields) == {"faction_rank", "last_promotion_date"}


async def test_empty_changes_write_nothing(profiles, notifications):
    result = await _engine(profiles, notifications).apply("member-1", {})
    assert profiles.updates == []
    assert notifications.batches == []
    assert result.updated_fields == ()
    assert result.notifications_created == 0


async def test_missing_profile_is_not_found_and_writes_nothing(profiles, notifications):
    with pytest.raises(NotFound):
        await _engine(profiles, notifications).apply("ghost", {"system_role": "user"})
    assert profiles.updates == []
    assert notifications.batches == []


async def test_missing_target_is_invalid_before_reading(profiles, notifications):
    with pytest.raises(InvalidArgument):
        await _engine(profiles, notifications).apply("", {"system_role": "user"})
    assert profiles.reads == 0


async def test_notification_failure_still_succeeds(profiles, notifications):
    notifications.fail_insert = True
    result = await _engine(profiles, notifications).apply("member-1", {"faction_rank": "Sergeant"})

    assert profiles.docs["member-1"]["faction_rank"] == "Sergeant"
    assert result.notifications_created == 0
    assert result.notification_error == "insert failed"


async def test_update_failure_propagates_without_notifications(profiles, notifications):
    profiles.fail_update = True
    with pytest.raises(StorageError):
        await _engine(profiles, notifications).apply("member-1", {"division": "Traffic"})
    assert notifications.batches == []


async def test_single_batch_for_multiple_transitions(profiles, notifications):
    await _engine(profiles, notifications).apply(
        "pending-1", {"system_role": "user", "division": "Traffic", "faction_rank": "Sergeant"}
    )
    assert len(profiles.updates) == 1
    assert len(notifications.batches) == 1
    assert len(notifications.batches[0]) == 3


async def test_malformed_changes_rejected_before_reading(profiles, notifications):
    with pytest.raises(InvalidArgument) as exc:
        await _engine(profiles, notifications).apply("member-1", {"is_bureau_manager": "maybe"})
    assert "is_bureau_manager" in exc.value.message
    assert profiles.reads == 0
    assert profiles.updates == []


async def test_unexpected_notification_error_is_not_fatal(profiles, notifications):
    async def _broken_insert(docs):
        raise RuntimeError("documento inválido")

    notifications.insert_many = _broken_insert
    result = await _engine(profiles, notifications).apply("member-1", {"division": "Traffic"})

    assert profiles.docs["member-1"]["division"] == "Traffic"
    assert result.notifications_created == 0
    assert result.notification_error == "RuntimeError: documento inválido"
