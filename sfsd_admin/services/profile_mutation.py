"""Motor de mutación de perfiles (operación "update role").

Aplica una actualización parcial a un perfil y deriva las notificaciones de las
transiciones reales:

- `system_role`: pending -> user genera "cuenta aprobada".
- `division`: valor distinto al almacenado genera "traslado".
- `faction_rank`: valor distinto al almacenado sella `last_promotion_date` y
  genera "cambio de rango".

El resto de campos reconocidos se escriben tal cual, sin comparación.

El cálculo (`plan_profile_mutation`) es puro; `ProfileMutationEngine.apply` lee
el perfil una vez (pre-imagen), hace un único `update` y, si hay algo que
notificar, una única inserción por lotes. Si esa inserción falla la operación
sigue siendo exitosa: el cambio de perfil es el efecto principal.

No hay control de concurrencia: dos mutaciones simultáneas del mismo perfil
se resuelven con last-write-wins en Mongo.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from sfsd_admin.core.config import settings
from sfsd_admin.core.exceptions import InvalidArgument, NotFound, StorageError
from sfsd_admin.core.time import now_utc

_log = logging.getLogger("sfsd.profile")

PROFILE_LINK = "/profile"

# Orden estable: define también el orden de escritura en el `$set`
RECOGNIZED_FIELDS: Tuple[str, ...] = (
    "system_role",
    "faction_rank",
    "division",
    "division_rank",
    "qualifications",
    "is_bureau_manager",
    "is_bureau_commander",
    "commanded_divisions",
)


class ProfileChanges(BaseModel):
    """Cambios propuestos con semántica de presencia.

    Un campo ausente no se toca; un campo presente con `None` es un valor real
    (se escribe `null`). La presencia se lee de `model_fields_set`.
    """
    model_config = ConfigDict(extra="ignore")

    system_role: Optional[str] = None
    faction_rank: Optional[str] = None
    division: Optional[str] = None
    division_rank: Optional[str] = None
    qualifications: Optional[List[str]] = None
    is_bureau_manager: Optional[bool] = None
    is_bureau_commander: Optional[bool] = None
    commanded_divisions: Optional[List[str]] = None

    def present(self) -> Dict[str, Any]:
        """Sólo los campos explícitamente enviados, en orden estable."""
        return {name: getattr(self, name) for name in RECOGNIZED_FIELDS if name in self.model_fields_set}


@dataclass
class MutationPlan:
    """Resultado puro del cálculo: columnas a escribir y notificaciones a crear."""
    updates: Dict[str, Any] = field(default_factory=dict)
    notifications: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class MutationResult:
    updated_fields: Tuple[str, ...]
    notifications_created: int
    notification_error: Optional[str] = None


class ProfileStore(Protocol):
    async def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]: ...

    async def update_profile(self, user_id: str, fields: Dict[str, Any]) -> None: ...


class NotificationSink(Protocol):
    async def insert_many(self, docs: List[Dict[str, Any]]) -> List[str]: ...


def coerce_changes(changes: Union[ProfileChanges, Mapping[str, Any], None]) -> ProfileChanges:
    """Valida un mapping crudo como `ProfileChanges`; tipos inválidos son `InvalidArgument`."""
    if isinstance(changes, ProfileChanges):
        return changes
    if changes is None:
        return ProfileChanges()
    if not isinstance(changes, Mapping):
        raise InvalidArgument("changes debe ser un objeto")
    try:
        return ProfileChanges.model_validate(dict(changes))
    except ValidationError as e:
        bad = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise InvalidArgument(f"Cambios inválidos: {bad}") from e


def _notification(user_id: str, title: str, message: str, type_: str) -> Dict[str, Any]:
    return {"user_id": user_id, "title": title, "message": message, "type": type_, "link": PROFILE_LINK}


def plan_profile_mutation(
    pre_image: Mapping[str, Any],
    changes: Union[ProfileChanges, Mapping[str, Any]],
    *,
    now: datetime,
    pending_role: str = "pending",
    approved_role: str = "user",
) -> MutationPlan:
    """Calcula el `$set` y las notificaciones comparando contra la pre-imagen."""
    changes = coerce_changes(changes)
    user_id = str(pre_image["id"])
    plan = MutationPlan()

    for name, value in changes.present().items():
        plan.updates[name] = value

        if name == "system_role":
            if pre_image.get("system_role") == pending_role and value == approved_role:
                plan.notifications.append(_notification(
                    user_id,
                    "Cuenta aprobada",
                    "Tu cuenta fue aprobada. Ya tienes acceso completo al sistema.",
                    "success",
                ))
        elif name == "division":
            if value != pre_image.get("division"):
                plan.notifications.append(_notification(
                    user_id,
                    "Traslado de división",
                    f"Fuiste trasladado a la división: {value}.",
                    "info",
                ))
        elif name == "faction_rank":
            if value != pre_image.get("faction_rank"):
                plan.updates["last_promotion_date"] = now
                plan.notifications.append(_notification(
                    user_id,
                    "Cambio de rango",
                    f"Tu nuevo rango es: {value}.",
                    "success",
                ))

    return plan


class ProfileMutationEngine:
    """Aplica `ProfileChanges` sobre el perfil `target_id` usando los stores inyectados."""

    def __init__(
        self,
        profiles: ProfileStore,
        notifications: NotificationSink,
        *,
        clock: Callable[[], datetime] = now_utc,
        pending_role: Optional[str] = None,
        approved_role: Optional[str] = None,
    ) -> None:
        self._profiles = profiles
        self._notifications = notifications
        self._clock = clock
        self._pending_role = pending_role or settings.pending_role
        self._approved_role = approved_role or settings.approved_role

    async def apply(self, target_id: str, changes: Union[ProfileChanges, Mapping[str, Any]]) -> MutationResult:
        if not target_id:
            raise InvalidArgument("Falta targetId")
        # Se valida antes de cualquier lectura
        changes = coerce_changes(changes)

        pre_image = await self._profiles.get_profile(target_id)
        if pre_image is None:
            raise NotFound("Perfil no encontrado")
        pre_image = {**pre_image, "id": target_id}

        plan = plan_profile_mutation(
            pre_image,
            changes,
            now=self._clock(),
            pending_role=self._pending_role,
            approved_role=self._approved_role,
        )
        if not plan.updates:
            return MutationResult(updated_fields=(), notifications_created=0)

        # Falla aquí => StorageError/NotFound al llamador, sin notificaciones
        await self._profiles.update_profile(target_id, plan.updates)
        fields = tuple(plan.updates)
        _log.info("Perfil actualizado target=%s fields=%s", target_id, ",".join(fields))

        if not plan.notifications:
            return MutationResult(updated_fields=fields, notifications_created=0)

        try:
            await self._notifications.insert_many(plan.notifications)
        except Exception as e:
            # El perfil ya quedó escrito: el fallo de notificaciones no es fatal
            reason = e.message if isinstance(e, StorageError) else f"{type(e).__name__}: {e}"
            _log.warning(
                "No se pudieron crear %d notificaciones para target=%s: %s",
                len(plan.notifications), target_id, reason,
            )
            return MutationResult(updated_fields=fields, notifications_created=0, notification_error=reason)
        return MutationResult(updated_fields=fields, notifications_created=len(plan.notifications))
