from fastapi import FastAPI

from src.web.routers.sectors import router as sectors_router
from src.web.routers.events import router as events_router

def register_routers(app: FastAPI):
    """Register all routers with the application."""
    app.include_router(sectors_router)
    app.include_router(events_router)
