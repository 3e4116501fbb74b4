"""API router that aggregates all routes."""

from fastapi import APIRouter

from groupgallery.api.routes import groups, health, images

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(images.router)
api_router.include_router(groups.router)
