"""
Operaciones administrativas sobre cuentas: borrar usuario y reasignar contraseña.
"""
from __future__ import annotations

import logging

from sfsd_admin.core.config import settings
from sfsd_admin.core.exceptions import InvalidArgument, NotFound
from sfsd_admin.infrastructure.security.passwords import hash_password
from sfsd_admin.repositories.stores import PrivilegedStore

_log = logging.getLogger("sfsd.admin")


async def delete_user(store: PrivilegedStore, user_id: str) -> None:
    """Borra la cuenta, el perfil y la bandeja de notificaciones del usuario."""
    if not user_id:
        raise InvalidArgument("Falta userId")
    account = await store.accounts.get_account(user_id)
    profile = await store.profiles.get_profile(user_id)
    if account is None and profile is None:
        raise NotFound("Usuario no encontrado")

    await store.accounts.delete_account(user_id)
    await store.profiles.delete_profile(user_id)
    removed = await store.notifications.delete_for_user(user_id)
    _log.info("Usuario borrado user_id=%s notifications=%d", user_id, removed)


async def update_password(store: PrivilegedStore, target_id: str, new_password: str) -> None:
    """Reemplaza la contraseña de otro usuario e invalida sus sesiones."""
    if not target_id or not new_password:
        raise InvalidArgument("Faltan datos: targetUserId y newPassword son obligatorios.")
    if len(new_password) < settings.min_password_length:
        raise InvalidArgument(f"La contraseña debe tener al menos {settings.min_password_length} caracteres.")

    if not await store.accounts.set_password_hash(target_id, hash_password(new_password)):
        raise NotFound("Usuario no encontrado")
    _log.info("Contraseña reasignada target=%s", target_id)
