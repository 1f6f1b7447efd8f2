"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import Base, engine
from app.errors import CarpoolError, carpool_error_handler

# Import routers
from app.routers import users, events, rsvps, carpools

# Import all models so Base.metadata knows about them
from app.models.user import User                      # noqa: F401
from app.models.event import Event, Shift             # noqa: F401
from app.models.rsvp import Rsvp                      # noqa: F401
from app.models.carpool import Carpool, CarpoolMember  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="Club Carpools",
    description="Carpool assignment for club offsite events: RSVPs, greedy seat matching and notifications",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(CarpoolError, carpool_error_handler)

# Register routers
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(rsvps.router, prefix="/api/rsvps", tags=["RSVPs"])
app.include_router(carpools.router, prefix="/api", tags=["Carpools"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
