"""API Routes module"""
from fastapi import APIRouter

from .subjects import router as subjects_router
from .access import router as access_router

# Main API router
api_router = APIRouter()

api_router.include_router(subjects_router, prefix="/subjects", tags=["Subjects"])
api_router.include_router(access_router, prefix="/access", tags=["Access"])

__all__ = ["api_router"]
