"""
University ID Card System API
Main application file
"""

from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import uvicorn

from app.core.config import settings
from app.core.database import engine, Base, check_database_connection
from app.core.init_db import seed_initial_data
from app.routers import (
    users,
    colleges,
    departments,
    programs,
    levels,
    persons,
    cards,
    generate_id,
    stats,
)

# ============================================================================
# Logging Configuration
# ============================================================================

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=settings.log_format
)
logger = logging.getLogger(__name__)

# ============================================================================
# FastAPI Application
# ============================================================================

docs_url = "/docs" if not settings.is_production else None
redoc_url = "/redoc" if not settings.is_production else None

app = FastAPI(
    title="University ID Card System API",
    version=settings.app_version,
    description="Manage colleges, persons and ID cards, generate university IDs and check cards are ready to print",
    license_info={
        "name": "Proprietary",
    },
    docs_url=docs_url,
    redoc_url=redoc_url,
)

# ============================================================================
# CORS Configuration
# ============================================================================

if settings.API_CORS_ORIGINS and settings.API_CORS_ORIGINS.strip() == "*":
    # Allow all origins (credentials must be False)
    origins = ["*"]
    allow_credentials = False
else:
    origins = list(settings.cors_origins)

    if settings.API_CORS_ORIGINS:
        additional_origins = [o.strip() for o in settings.API_CORS_ORIGINS.split(",") if o.strip()]
        origins.extend(additional_origins)

    allow_credentials = True

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# Root & Health Endpoints
# ============================================================================

@app.get("/", tags=["Root"])
def root():
    """Root endpoint - API information"""
    return {
        "name": "University ID Card System API",
        "version": settings.app_version,
        "status": "running",
        "documentation": docs_url,
        "endpoints": {
            "health": "/health",
            "users": "/api/users",
            "colleges": "/api/colleges",
            "persons": "/api/persons",
            "cards": "/api/cards",
            "generate_id": "/api/generate-id",
            "stats": "/api/stats/dashboard"
        }
    }

@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint for API monitoring"""
    database_ok = check_database_connection()
    return {
        "status": "ok" if database_ok else "degraded",
        "database": "ok" if database_ok else "unavailable",
        "version": settings.app_version,
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

# ============================================================================
# Event Handlers
# ============================================================================

@app.on_event("startup")
async def startup_event():
    """Actions to perform on application startup"""
    logger.info("=" * 60)
    logger.info("Starting University ID Card System API")
    logger.info("=" * 60)
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"CORS Origins: {settings.API_CORS_ORIGINS or 'Default'}")
    logger.info(f"JWT Expiration: {settings.JWT_EXPIRATION_HOURS} hours")
    logger.info("=" * 60)

    # Create database tables if they don't exist
    try:
        logger.info("Ensuring database tables exist...")
        Base.metadata.create_all(bind=engine)
        logger.info("✓ Database tables ready")
        if settings.seed_database:
            seed_initial_data()
    except Exception as e:
        logger.error(f"✗ Database initialization failed: {e}")
        logger.warning("Application will continue, but database operations may fail")

@app.on_event("shutdown")
async def shutdown_event():
    """Actions to perform on application shutdown"""
    logger.info("Shutting down University ID Card System API")

# ============================================================================
# Router Registration
# ============================================================================

app.include_router(users.router)  # Operator authentication and management
app.include_router(colleges.router)  # University structure
app.include_router(departments.router)
app.include_router(programs.router)
app.include_router(levels.router)
app.include_router(persons.router)  # Students, staff and visitors
app.include_router(cards.router)  # Issued ID cards
app.include_router(generate_id.router)  # Sequential university IDs
app.include_router(stats.router)  # Dashboard statistics

if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.LOG_LEVEL.lower()
    )
