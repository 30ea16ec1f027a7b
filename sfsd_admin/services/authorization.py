"""Chequeo de permisos por capacidad.

Cada operación administrativa declara la capacidad que necesita y el perfil del
llamador se evalúa contra un predicado único por capacidad. Los predicados
no están unificados: cada operación conserva su regla. Una cuenta pendiente de
aprobación nunca puede editar perfiles (ni el suyo) ni borrar imágenes.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from sfsd_admin.core.config import settings
from sfsd_admin.core.exceptions import Forbidden

Profile = Mapping[str, Any]


class Capability(str, Enum):
    PROFILE_UPDATE = "profile.update"
    USER_DELETE = "user.delete"
    USER_PASSWORD = "user.password"
    CASE_DELETE = "case.delete"
    ASSET_DELETE = "asset.delete"


def _approved(caller: Profile, resource: Optional[Profile] = None) -> bool:
    role = caller.get("system_role")
    return bool(role) and role != settings.pending_role


def _profile_editor(caller: Profile, resource: Optional[Profile]) -> bool:
    return _approved(caller) and caller.get("system_role") in settings.profile_editor_roles


def _is_admin(caller: Profile, resource: Optional[Profile] = None) -> bool:
    return caller.get("system_role") in settings.admin_roles


def _is_executive(caller: Profile, resource: Optional[Profile]) -> bool:
    return caller.get("faction_rank") in settings.executive_ranks


def _owns_or_admin(caller: Profile, resource: Optional[Profile]) -> bool:
    if resource is not None and resource.get("owner_id") == caller.get("id"):
        return True
    return _is_admin(caller)


_POLICY: Dict[Capability, Callable[[Profile, Optional[Profile]], bool]] = {
    Capability.PROFILE_UPDATE: _profile_editor,
    Capability.USER_DELETE: _is_admin,
    Capability.USER_PASSWORD: _is_executive,
    Capability.CASE_DELETE: _owns_or_admin,
    Capability.ASSET_DELETE: _approved,
}

_DENIED: Dict[Capability, str] = {
    Capability.PROFILE_UPDATE: "No tienes permiso para modificar perfiles.",
    Capability.USER_DELETE: "No tienes permiso para borrar usuarios.",
    Capability.USER_PASSWORD: "Sólo el Executive Staff puede cambiar contraseñas de otros usuarios.",
    Capability.CASE_DELETE: "Sólo el autor del caso o un administrador puede borrarlo.",
    Capability.ASSET_DELETE: "No tienes permiso para borrar imágenes.",
}


def authorize(caller: Optional[Profile], capability: Capability, *, resource: Optional[Profile] = None) -> bool:
    """True si el perfil `caller` tiene la capacidad (sobre `resource`, si aplica)."""
    if not caller:
        return False
    return _POLICY[capability](caller, resource)


def require(caller: Optional[Profile], capability: Capability, *, resource: Optional[Profile] = None) -> None:
    if not authorize(caller, capability, resource=resource):
        raise Forbidden(_DENIED[capability])


async def load_caller(profiles, user_id: str) -> Dict[str, Any]:
    """Perfil del llamador. Un llamador autenticado sin perfil no tiene permisos."""
    caller = await profiles.get_profile(user_id)
    if caller is None:
        raise Forbidden("El perfil del llamador no existe.")
    return caller


async def authorize_caller(profiles, user_id: str, capability: Capability) -> Dict[str, Any]:
    caller = await load_caller(profiles, user_id)
    require(caller, capability)
    return caller
