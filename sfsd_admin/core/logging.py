"""
Configuración de logging para la aplicación e integración con Uvicorn.

Los loggers propios cuelgan del namespace `sfsd.*`.
"""
import logging

# Clientes externos muy verbosos en DEBUG
_NOISY = ("pymongo", "urllib3", "cloudinary")


def setup_logging(level: str = "INFO") -> None:
    lvl = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "sfsd"):
        logging.getLogger(name).setLevel(lvl)
    for name in _NOISY:
        logging.getLogger(name).setLevel(max(lvl, logging.WARNING))
