from fastapi import APIRouter

from src.bale.api.routes import admin, auth, callback, invites, upgrades

api_router = APIRouter(prefix="/api")
api_router.include_router(invites.router)
api_router.include_router(upgrades.router)
api_router.include_router(admin.router)
api_router.include_router(auth.router)
api_router.include_router(auth.account_router)

# Browser landing pages live outside /api
page_router = APIRouter()
page_router.include_router(callback.router)
