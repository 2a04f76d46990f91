from fastapi import APIRouter

from accounts.presentation.routers.health import router as health_router
from accounts.presentation.routers.users import router as users_router

api = APIRouter()

# Add all /api routers here
routers = (users_router,)
for router in routers:
    api.include_router(router, prefix="/api")

api.include_router(health_router)
