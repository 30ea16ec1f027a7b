"""
Rate limit simple en memoria (ventana deslizante por llamador + ruta).

Uso típico en rutas admin:
    if not rate_limit.allow((f"user:{caller_id}", "/admin/update-role"), limit=30):
        raise HTTPException(429, ...)
"""
from time import time
from typing import Dict, Tuple

BUCKET: Dict[Tuple[str, str], list[float]] = {}


def allow(key: Tuple[str, str], limit: int = 5, window_seconds: int = 60, now: float | None = None) -> bool:
    """Devuelve True si se permite la acción y registra el intento.

    key: (identificador, ruta)
    limit: máximo de intentos dentro de la ventana
    window_seconds: ventana de tiempo en segundos
    """
    now = time() if now is None else now
    q = BUCKET.setdefault(key, [])
    # elimina timestamps fuera de ventana
    q[:] = [t for t in q if now - t < window_seconds]
    if len(q) >= limit:
        return False
    q.append(now)
    return True


def reset() -> None:
    """Limpia el bucket (útil en tests o reinicios)."""
    BUCKET.clear()
