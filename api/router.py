"""Main API router that includes the endpoint routers."""

from fastapi import APIRouter

from api.endpoints import health, waitlist

# Main API router
api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(waitlist.router, tags=["waitlist"])
