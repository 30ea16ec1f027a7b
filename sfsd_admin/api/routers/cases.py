"""Borrado de casos junto con sus evidencias."""
from fastapi import APIRouter, Depends

from sfsd_admin.api.deps import get_asset_host, get_identity, get_privileged_store
from sfsd_admin.api.schemas.admin import DeleteCaseOut, DeleteCasePayload
from sfsd_admin.core.exceptions import InvalidArgument
from sfsd_admin.infrastructure.security.token_service import Identity
from sfsd_admin.infrastructure.storage.cloudinary_host import CloudinaryAssetHost
from sfsd_admin.repositories.stores import PrivilegedStore
from sfsd_admin.services import case_service
from sfsd_admin.services.authorization import load_caller

router = APIRouter(prefix="/case", tags=["Case"])


@router.post("/delete", response_model=DeleteCaseOut, summary="Borrar caso y evidencias")
async def delete_case(
    payload: DeleteCasePayload,
    identity: Identity = Depends(get_identity),
    store: PrivilegedStore = Depends(get_privileged_store),
    host: CloudinaryAssetHost = Depends(get_asset_host),
) -> DeleteCaseOut:
    if not payload.case_id:
        raise InvalidArgument("Falta caseId")
    caller = await load_caller(store.profiles, identity.user_id)
    out = await case_service.delete_case(store, host, caller, payload.case_id)
    return DeleteCaseOut(message="Caso y archivos borrados.", **out)
