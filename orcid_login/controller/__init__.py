from fastapi import APIRouter

from .oauth_ctrl import router as oauth_router

base_router = APIRouter()

for router in [oauth_router]:
    base_router.include_router(router)
