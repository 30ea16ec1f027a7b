"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sfsd_admin.api.router import api_router
from sfsd_admin.core.config import settings
from sfsd_admin.core.exceptions import register_exception_handlers
from sfsd_admin.core.logging import setup_logging
from sfsd_admin.core.middleware import add_middlewares
from sfsd_admin.infrastructure.db.bootstrap import ensure_collections
from sfsd_admin.infrastructure.db.mongo import db_ready, init_mongo
from sfsd_admin.infrastructure.db.mongo_async import close_async_db

_log = logging.getLogger("sfsd.startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_mongo()
    # Garantiza colecciones/índices mínimos si hay conexión
    if db_ready():
        ensure_collections()
    else:
        _log.warning("Mongo no listo; omitiendo ensure_collections()")
    yield
    close_async_db()


def create_app(*, with_lifespan: bool = True) -> FastAPI:
    app = FastAPI(title=settings.app_name, lifespan=lifespan if with_lifespan else None)
    add_middlewares(app)
    register_exception_handlers(app)
    # Monta routers bajo el prefijo configurado
    app.include_router(api_router, prefix=settings.api_prefix_normalized)
    return app


setup_logging()
app = create_app()
