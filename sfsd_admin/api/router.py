"""Agregador de routers de la API."""
from fastapi import APIRouter

from sfsd_admin.api.routers import admin, assets, cases, cron, health, notifications

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(admin.router)
api_router.include_router(assets.router)
api_router.include_router(cases.router)
api_router.include_router(notifications.router)
api_router.include_router(cron.router)
