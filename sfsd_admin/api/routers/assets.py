"""Endpoints de imágenes en Cloudinary: borrado puntual y subida."""
from fastapi import APIRouter, Depends, File, Form, UploadFile

from sfsd_admin.api.deps import get_asset_host, get_identity, get_privileged_store
from sfsd_admin.api.schemas.assets import DeleteImageOut, DeleteImagePayload, UploadImageOut
from sfsd_admin.core.exceptions import InvalidArgument
from sfsd_admin.infrastructure.security.token_service import Identity
from sfsd_admin.infrastructure.storage.cloudinary_host import (
    CloudinaryAssetHost,
    optimized_avatar_url,
    public_id_from_url,
)
from sfsd_admin.repositories.stores import PrivilegedStore
from sfsd_admin.services import asset_service
from sfsd_admin.services.authorization import Capability, authorize_caller

router = APIRouter(tags=["Assets"])


@router.post("/delete-image", response_model=DeleteImageOut, summary="Borrar imagen (Cloudinary)")
async def delete_image(
    payload: DeleteImagePayload,
    identity: Identity = Depends(get_identity),
    store: PrivilegedStore = Depends(get_privileged_store),
    host: CloudinaryAssetHost = Depends(get_asset_host),
) -> DeleteImageOut:
    if not payload.public_id:
        raise InvalidArgument("Missing publicId")
    await authorize_caller(store.profiles, identity.user_id, Capability.ASSET_DELETE)
    result = await asset_service.delete_image(host, payload.public_id)
    return DeleteImageOut(result=result)


@router.post("/assets/upload", response_model=UploadImageOut, summary="Subir imagen (avatar/evidencia)")
async def upload_image(
    file: UploadFile = File(...),
    kind: str = Form("evidence"),
    identity: Identity = Depends(get_identity),
    host: CloudinaryAssetHost = Depends(get_asset_host),
) -> UploadImageOut:
    file.file.seek(0)
    url = await asset_service.upload_image(host, file.file, kind, file.content_type)
    return UploadImageOut(
        url=url,
        public_id=public_id_from_url(url),
        avatar_url=optimized_avatar_url(url) if kind == "avatar" else None,
    )
