from fastapi import APIRouter

from pushrelay.api.v1 import health, push


api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(push.router, prefix="", tags=["push"])
