from fastapi import APIRouter
from boq_tracker.api.routers import progress

api_router = APIRouter()
api_router.include_router(progress.router, prefix="/progress", tags=["progress"])
