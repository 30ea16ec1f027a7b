"""
Verificación de access tokens (JWT) emitidos por el proveedor de identidad.

El backend no emite tokens: sólo valida firma, expiración y audiencia, y
devuelve la identidad (`sub`) del llamador.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import jwt

from sfsd_admin.core.config import settings
from sfsd_admin.core.exceptions import Unauthorized


@dataclass(frozen=True)
class Identity:
    """Identidad verificada del llamador."""
    user_id: str
    email: Optional[str] = None
    token_version: Optional[int] = None


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decodifica y valida firma/expiración (y `aud` si está configurada). Devuelve payload.
    """
    if not settings.jwt_secret:
        raise Unauthorized("JWT_SECRET no configurado")
    options = {"require": ["exp", "sub"]}
    if not settings.jwt_audience:
        options["verify_aud"] = False
    return jwt.decode(
        token,
        key=settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience or None,
        options=options,
    )


def verify_token(token: str) -> Identity:
    """Valida el token y devuelve la identidad; cualquier fallo es `Unauthorized`."""
    if not token:
        raise Unauthorized("Unauthorized: No token provided.")
    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expirado")
    except jwt.PyJWTError:
        raise Unauthorized("Token inválido")
    sub = payload.get("sub")
    if not sub:
        raise Unauthorized("Token inválido")
    return Identity(user_id=str(sub), email=payload.get("email"), token_version=payload.get("token_version"))
