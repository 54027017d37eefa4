"""Routes API / API routes."""

from fastapi import APIRouter

from suivi_chantiers.api import (
    auth,
    users,
    chantiers,
    interventions,
    catalog,
    imports,
)

api_router = APIRouter(prefix="/api")

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(chantiers.router, prefix="/chantiers", tags=["chantiers"])
api_router.include_router(interventions.router, prefix="/interventions", tags=["interventions"])
api_router.include_router(catalog.router, tags=["catalog"])
api_router.include_router(imports.router, prefix="/imports", tags=["imports"])
