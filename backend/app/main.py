"""FastAPI application entry point for the Workout Planner API."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.database import SessionLocal, create_tables
from app.error_handlers import register_exception_handlers
from app.routers import exercises, sets, users, workouts
from app.services.exercise_seeder import exercise_catalog_seeder
from app.services.rate_limiter import enforce_rate_limit

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "1; mode=block",
    "Cache-Control": "no-cache, no-store, max-age=0, must-revalidate",
}


def seed_reference_data() -> None:
    """Load the default exercise catalog if enabled."""
    if not settings.SEED_EXERCISES:
        return
    db = SessionLocal()
    try:
        exercise_catalog_seeder.seed(db)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: Create database tables
    create_tables()
    seed_reference_data()
    logger.info("Workout Planner API started")
    yield


app = FastAPI(
    title="Workout Planner API",
    description="Backend API for the Workout Planner - exercises, workout sessions and sets",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS - allow the configured frontend plus local development origins
cors_origins = [
    settings.FRONTEND_URL,
    "http://localhost:5173",
    "http://localhost:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


register_exception_handlers(app)

# Include routers
rate_limited = [Depends(enforce_rate_limit)]
app.include_router(
    users.router, prefix=f"{API_PREFIX}/users", tags=["Users"], dependencies=rate_limited
)
app.include_router(
    exercises.router,
    prefix=f"{API_PREFIX}/exercises",
    tags=["Exercises"],
    dependencies=rate_limited,
)
app.include_router(
    workouts.router,
    prefix=f"{API_PREFIX}/workouts",
    tags=["Workouts"],
    dependencies=rate_limited,
)
app.include_router(
    sets.router,
    prefix=f"{API_PREFIX}/workout-exercises",
    tags=["Sets"],
    dependencies=rate_limited,
)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - API information."""
    return {
        "name": "Workout Planner API",
        "version": "1.0.0",
        "status": "running",
    }


@app.get("/health", tags=["Health"])
@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
