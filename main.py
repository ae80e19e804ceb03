"""
ASAC SDG Advocacy Club Portal - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from sdgclub.core.config import settings
from sdgclub.core.db import engine, Base
from sdgclub.api import routes_academic, routes_admin, routes_auth, routes_events, routes_member, routes_public, ws
from sdgclub.services.errors import ClubError
from sdgclub.utils.responses import club_error_response

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title=settings.ORGANIZATION_NAME,
    description="Membership, events and check-in backend for the SDG advocacy club",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(ClubError)
async def handle_club_error(request: Request, exc: ClubError):
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    return club_error_response(exc)

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_auth.router, prefix="/auth", tags=["auth"])
app.include_router(routes_member.router, prefix="/me", tags=["member"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])
app.include_router(routes_events.router, prefix="/admin/events", tags=["admin-events"])
app.include_router(routes_academic.router, prefix="/admin/academic", tags=["admin-academic"])
app.include_router(ws.router, prefix="/ws", tags=["websocket"])

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
