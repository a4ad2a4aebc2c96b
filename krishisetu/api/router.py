"""
API router - aggregates all endpoint modules (RESTful structure).
"""

from fastapi import APIRouter

from krishisetu.api.endpoints import activity, crops, health, interests

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(crops.router, prefix="/crops", tags=["crops"])
api_router.include_router(interests.router, prefix="/crops", tags=["interests"])
api_router.include_router(activity.router, tags=["activity"])
