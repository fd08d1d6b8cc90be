"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from roomgate.api.routes import rooms

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(rooms.router)

page_router = rooms.page_router
