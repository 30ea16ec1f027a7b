"""Cliente MongoDB síncrono (PyMongo).

Sólo se usa en el arranque (bootstrap de índices) y en scripts de consola;
las rutas HTTP usan el cliente asíncrono de `mongo_async`.
"""
import logging

import certifi
from pymongo import MongoClient
from pymongo.errors import ServerSelectionTimeoutError

from sfsd_admin.core.config import settings

_log = logging.getLogger("sfsd.mongo")

_client: MongoClient | None = None
_db = None


def client_kwargs(uri: str) -> dict:
    """Opciones de conexión compartidas por los clientes sync y async."""
    kwargs = dict(serverSelectionTimeoutMS=15000)
    if uri.startswith("mongodb+srv://"):
        # SRV ya implica TLS; proveemos CA bundle para robustez
        kwargs["tlsCAFile"] = certifi.where()
    elif not uri.startswith("mongodb://localhost") and not uri.startswith("mongodb://127.0.0.1"):
        kwargs["tls"] = True
        kwargs["tlsCAFile"] = certifi.where()
        if settings.mongo_tls_insecure:
            kwargs["tlsAllowInvalidCertificates"] = True
        if settings.mongo_tls_allow_invalid_hostnames:
            kwargs["tlsAllowInvalidHostnames"] = True
    return kwargs


def init_mongo() -> None:
    """
    Inicializa el cliente y valida conexión (ping).
    Llamar una sola vez en el startup de FastAPI o al inicio de un script.
    """
    global _client, _db
    uri = settings.mongo_uri
    try:
        _client = MongoClient(uri, **client_kwargs(uri))
        _client.admin.command("ping")
        _db = _client[settings.mongo_db]
        _log.info("Mongo conectado (db=%s)", settings.mongo_db)
    except ServerSelectionTimeoutError as e:
        # No tumbar la app: deja _db en None y loggea
        _log.warning("Mongo no accesible (timeout): %s", e)
        _client = None
        _db = None


def get_db():
    """
    Devuelve la referencia a la base de datos síncrona.
    """
    if _db is None:
        raise RuntimeError("Mongo no inicializado. Intenta más tarde.")
    return _db


def db_ready() -> bool:
    return _db is not None
