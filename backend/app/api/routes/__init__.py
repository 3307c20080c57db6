from fastapi import APIRouter

from .instagram import router as instagram_router

api_router = APIRouter(prefix="/api")
api_router.include_router(instagram_router)

__all__ = ["api_router"]
