"""
Endpoints administrativos: actualizar perfil/rol, borrar usuario, reasignar contraseña.

La API es delgada: valida entrada, aplica la política de permisos y delega en
los servicios. Los errores de dominio los traduce `core/exceptions.py`.
"""
from fastapi import APIRouter, Depends

from sfsd_admin.api.deps import (
    admin_rate_limit,
    get_identity,
    get_mutation_engine,
    get_privileged_store,
)
from sfsd_admin.api.schemas.admin import (
    DeleteUserPayload,
    SuccessOut,
    UpdatePasswordPayload,
    UpdateRolePayload,
)
from sfsd_admin.core.exceptions import InvalidArgument
from sfsd_admin.infrastructure.security.token_service import Identity
from sfsd_admin.repositories.stores import PrivilegedStore
from sfsd_admin.services import admin_service
from sfsd_admin.services.authorization import Capability, authorize_caller
from sfsd_admin.services.profile_mutation import ProfileMutationEngine

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(admin_rate_limit)])


@router.post(
    "/update-role",
    response_model=SuccessOut,
    summary="Actualizar perfil de otro miembro",
    description="Aplica cambios parciales (rol, rango, división, cualificaciones...) y genera las notificaciones de transición.",
)
async def update_role(
    payload: UpdateRolePayload,
    identity: Identity = Depends(get_identity),
    store: PrivilegedStore = Depends(get_privileged_store),
    engine: ProfileMutationEngine = Depends(get_mutation_engine),
) -> SuccessOut:
    if not payload.target_id:
        raise InvalidArgument("Falta targetId")
    await authorize_caller(store.profiles, identity.user_id, Capability.PROFILE_UPDATE)
    await engine.apply(payload.target_id, payload.changes)
    return SuccessOut()


@router.post("/delete-user", response_model=SuccessOut, summary="Borrar usuario")
async def delete_user(
    payload: DeleteUserPayload,
    identity: Identity = Depends(get_identity),
    store: PrivilegedStore = Depends(get_privileged_store),
) -> SuccessOut:
    if not payload.user_id:
        raise InvalidArgument("Falta userId")
    await authorize_caller(store.profiles, identity.user_id, Capability.USER_DELETE)
    await admin_service.delete_user(store, payload.user_id)
    return SuccessOut()


@router.post("/update-password", response_model=SuccessOut, summary="Reasignar contraseña de otro usuario")
async def update_password(
    payload: UpdatePasswordPayload,
    identity: Identity = Depends(get_identity),
    store: PrivilegedStore = Depends(get_privileged_store),
) -> SuccessOut:
    if not payload.target_id or not payload.new_password:
        raise InvalidArgument("Faltan datos: targetUserId y newPassword son obligatorios.")
    await authorize_caller(store.profiles, identity.user_id, Capability.USER_PASSWORD)
    await admin_service.update_password(store, payload.target_id, payload.new_password)
    return SuccessOut()
