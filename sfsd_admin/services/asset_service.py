"""Servicio de imágenes: borrado puntual y subida (avatar/evidencia)."""
from __future__ import annotations

import logging
from typing import BinaryIO

from sfsd_admin.core.exceptions import AssetHostError, InvalidArgument
from sfsd_admin.infrastructure.storage.cloudinary_host import DESTROY_OK, CloudinaryAssetHost

_log = logging.getLogger("sfsd.assets")

ALLOWED_KINDS = ("evidence", "avatar")


async def delete_image(host: CloudinaryAssetHost, public_id: str) -> str:
    """Borra una imagen. `ok` y `not found` son éxito; cualquier otro resultado es error."""
    if not public_id:
        raise InvalidArgument("Missing publicId")
    result = await host.destroy(public_id)
    if result not in DESTROY_OK:
        raise AssetHostError(f"Cloudinary delete failed: {result}")
    _log.info("Imagen borrada public_id=%s result=%s", public_id, result)
    return result


async def upload_image(host: CloudinaryAssetHost, fileobj: BinaryIO, kind: str, content_type: str | None = None) -> str:
    if kind not in ALLOWED_KINDS:
        raise InvalidArgument(f"kind debe ser uno de: {', '.join(ALLOWED_KINDS)}")
    if content_type and not content_type.startswith("image/"):
        raise InvalidArgument("Sólo se aceptan imágenes")
    return await host.upload(fileobj, kind)  # type: ignore[arg-type]
