"""Main FastAPI application for the Physics LMS service."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from prometheus_fastapi_instrumentator import Instrumentator

from physics_lms.core.config import settings
from physics_lms.core.logging import setup_logging
from physics_lms.core.database import init_db, get_db
from physics_lms.core.dependencies import get_cache
from physics_lms.routers import export, users, progress, resources

# Setup structured logging
setup_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle manager."""
    logger.info("Starting Physics LMS Service", version=settings.APP_VERSION)

    await init_db()
    app.state.cache = await get_cache()

    logger.info("Physics LMS service initialized successfully")

    yield

    logger.info("Shutting down Physics LMS Service")


app = FastAPI(
    title=settings.APP_NAME,
    description="Career path learning progress, quizzes, achievements and data export",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production() else None,
    redoc_url="/redoc" if not settings.is_production() else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Prometheus metrics; middleware must be added before startup
if settings.ENABLE_METRICS:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics")

app.include_router(export.router, prefix="/api", tags=["export"])
app.include_router(users.router, prefix="/api", tags=["users"])
app.include_router(progress.router, prefix="/api", tags=["progress"])
app.include_router(resources.router, prefix="/api", tags=["resources"])


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "status": "operational"
    }


@app.get("/health", tags=["health"])
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint."""
    health_status = {
        "status": "healthy",
        "service": settings.SERVICE_NAME,
        "version": settings.APP_VERSION,
        "checks": {}
    }

    try:
        await db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = "healthy"
    except Exception as e:
        health_status["checks"]["database"] = f"unhealthy: {str(e)}"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(content=health_status, status_code=status_code)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "physics_lms.main:app",
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
        reload=settings.ENVIRONMENT == "development",
        log_config=None  # Use structlog instead
    )
