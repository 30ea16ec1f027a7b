"""
Borrado de casos (MCB) con limpieza de evidencias en Cloudinary.

Las evidencias se leen antes de borrar nada: primero se purgan las imágenes del
host y luego los registros del caso y sus dependientes.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from sfsd_admin.core.exceptions import InvalidArgument, NotFound
from sfsd_admin.infrastructure.storage.cloudinary_host import CloudinaryAssetHost, public_id_from_url
from sfsd_admin.repositories.stores import PrivilegedStore
from sfsd_admin.services.authorization import Capability, require

_log = logging.getLogger("sfsd.case")


async def delete_case(
    store: PrivilegedStore,
    host: CloudinaryAssetHost,
    caller: Mapping[str, Any],
    case_id: str,
) -> Dict[str, Any]:
    if not case_id:
        raise InvalidArgument("Falta caseId")
    case = await store.cases.get_case(case_id)
    if case is None:
        raise NotFound("Caso no encontrado")
    require(caller, Capability.CASE_DELETE, resource=case)

    paths = await store.cases.list_image_evidence_paths(case_id)
    public_ids = [pid for pid in (public_id_from_url(p) for p in paths) if pid]
    if public_ids:
        await host.delete_resources(public_ids)

    counts = await store.cases.delete_case_cascade(case_id)
    _log.info("Caso borrado case_id=%s images=%d counts=%s", case_id, len(public_ids), counts)
    return {"images_deleted": len(public_ids), "records": counts}
