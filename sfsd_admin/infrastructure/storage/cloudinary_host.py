"""Cliente de Cloudinary (host de imágenes de avatar y evidencias).

- Configura el SDK con las credenciales del servidor.
- Las llamadas del SDK son bloqueantes: se ejecutan en un thread para no
  bloquear el event loop.
- Helpers puros de URL: `public_id_from_url` y `optimized_avatar_url`.
"""
from __future__ import annotations

import asyncio
import logging
import re
from functools import partial
from typing import Any, BinaryIO, Dict, Iterable, List, Literal, Optional

import cloudinary
import cloudinary.api
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from sfsd_admin.core.config import settings
from sfsd_admin.core.exceptions import AssetHostError

_log = logging.getLogger("sfsd.cloudinary")

UPLOAD_MARKER = "/upload/"
_VERSION_PREFIX = re.compile(r"^v\d+/")

# Resultados de `destroy` que cuentan como borrado exitoso
DESTROY_OK = ("ok", "not found")

AssetKind = Literal["evidence", "avatar"]


def public_id_from_url(url: Optional[str]) -> Optional[str]:
    """Deriva el public_id de Cloudinary a partir de la URL almacenada.

    `https://res.cloudinary.com/<cloud>/image/upload/v1234/evidence/abc.jpg`
    -> `evidence/abc`. Devuelve None si la URL no tiene la forma esperada.
    """
    if not url or "cloudinary.com" not in url:
        return None
    parts = url.split(UPLOAD_MARKER)
    if len(parts) < 2:
        return None
    path = _VERSION_PREFIX.sub("", parts[1], count=1)
    dot = path.rfind(".")
    if dot <= 0:
        return None
    return path[:dot]


def optimized_avatar_url(url: Optional[str], size: int = 400) -> str:
    """Inserta la transformación de avatar (recorte centrado en la cara) tras `/upload/`."""
    if not url:
        return ""
    if "cloudinary.com" not in url:
        return url
    parts = url.split(UPLOAD_MARKER)
    if len(parts) != 2:
        return url
    transformation = f"c_fill,g_face,w_{size},h_{size},q_auto,f_auto"
    return f"{parts[0]}{UPLOAD_MARKER}{transformation}/{parts[1]}"


def configure() -> None:
    """Configura el SDK global con las credenciales de `settings`."""
    cloudinary.config(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        secure=True,
    )


class CloudinaryAssetHost:
    """Operaciones de borrado/subida contra Cloudinary."""

    def __init__(self) -> None:
        if not settings.cloudinary_configured:
            _log.warning("Cloudinary sin credenciales completas; las operaciones fallarán")
        configure()

    async def _run(self, fn, *args, **kwargs) -> Any:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, partial(fn, *args, **kwargs))
        except CloudinaryError as e:
            raise AssetHostError(f"Cloudinary: {e}") from e

    async def destroy(self, public_id: str) -> str:
        """Borra una imagen invalidando la caché del CDN. Devuelve el `result` del host."""
        res: Dict[str, Any] = await self._run(
            cloudinary.uploader.destroy, public_id, invalidate=True, resource_type="image"
        )
        return str(res.get("result", ""))

    async def delete_resources(self, public_ids: Iterable[str]) -> Dict[str, str]:
        """Borrado por lotes. Devuelve el mapa public_id -> estado."""
        ids: List[str] = [p for p in public_ids if p]
        if not ids:
            return {}
        res: Dict[str, Any] = await self._run(cloudinary.api.delete_resources, ids, resource_type="image")
        return dict(res.get("deleted") or {})

    async def upload(self, fileobj: BinaryIO, kind: AssetKind = "evidence") -> str:
        """Sube una imagen con el preset/carpeta del tipo indicado. Devuelve `secure_url`."""
        if kind == "avatar":
            preset, folder = settings.cloudinary_upload_preset_avatar, "avatars"
        else:
            preset, folder = settings.cloudinary_upload_preset_evidence, "evidence"
        kwargs: Dict[str, Any] = {"folder": folder, "resource_type": "image"}
        if preset:
            kwargs["upload_preset"] = preset
        res: Dict[str, Any] = await self._run(cloudinary.uploader.upload, fileobj, **kwargs)
        url = res.get("secure_url")
        if not url:
            raise AssetHostError("Cloudinary no devolvió secure_url")
        return url
