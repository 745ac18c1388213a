"""
FastAPI main application for the City Forecast API.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from tortoise.contrib.fastapi import register_tortoise

from forecast_api.config import load_api_config
from forecast_api.database import TORTOISE_ORM
from forecast_api.exceptions import ForecastAPIError, StorageFailure, Unauthorized
from forecast_api.routes import health, stats, weather
from forecast_api.utils.logger import setup_logging

config = load_api_config()
api_config = config['api']
logger = setup_logging(config.get('logging'))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Handles startup and shutdown events.
    """
    logger.section(f"Starting {api_config['title']} v{api_config['version']}")
    yield
    logger.info("Shutting down API")


# Create FastAPI application
app = FastAPI(
    title=api_config['title'],
    version=api_config['version'],
    description=api_config['description'],
    lifespan=lifespan,
)

# Register Tortoise ORM; the cities table is created on startup if missing
register_tortoise(
    app,
    config=TORTOISE_ORM,
    generate_schemas=config.get('database', {}).get('generate_schemas', True),
    add_exception_handlers=False,
)

# Configure CORS
if api_config['cors']['enabled']:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config['cors']['origins'],
        allow_credentials=api_config['cors']['allow_credentials'],
        allow_methods=api_config['cors']['allow_methods'],
        allow_headers=api_config['cors']['allow_headers'],
    )


@app.exception_handler(ForecastAPIError)
async def forecast_api_error_handler(request: Request, exc: ForecastAPIError):
    """Map domain errors to responses without leaking internal detail."""
    if isinstance(exc, StorageFailure):
        logger.error("Storage failure on %s: %s", request.url.path, exc, exc_info=exc)
    else:
        logger.debug("%s on %s: %s", type(exc).__name__, request.url.path, exc)

    headers = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": exc.challenge}

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )


# Include routers
app.include_router(health.router, prefix="/api/v1", tags=["Health"])
app.include_router(weather.router, prefix="/api/v1", tags=["Weather"])
app.include_router(stats.router, prefix="/api/v1", tags=["Stats"])


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": api_config['title'],
        "version": api_config['version'],
        "description": api_config['description'],
        "docs": "/docs",
        "weather": "/api/v1/weather?city=Paris",
        "health": "/api/v1/health"
    }
