"""
Main API router aggregator
"""
from fastapi import APIRouter

from app.api.v1.endpoints import (
    chat,
    health,
    sessions,
    templates,
)

api_router = APIRouter()

# Include routers
api_router.include_router(templates.router, prefix="/templates", tags=["Templates"])
api_router.include_router(chat.router, tags=["Chat"])
api_router.include_router(sessions.router, tags=["Sessions"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])
