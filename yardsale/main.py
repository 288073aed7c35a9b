"""
FastAPI main application for Yard Sale Finder.
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from yardsale.config import get_settings
from yardsale.db import init_db, close_db
from yardsale.error_handling import ErrorHandler, register_exception_handlers

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup
    logger.info(f"Starting Yard Sale Finder API ({settings.environment})...")
    await init_db(settings.database)
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down Yard Sale Finder API...")
    await close_db()


app = FastAPI(
    title="Yard Sale Finder API",
    description="Find yard, garage and estate sales near you",
    version=settings.version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

register_exception_handlers(app, ErrorHandler(include_detail=not settings.is_production))


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.version
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Yard Sale Finder API",
        "docs": "/docs",
        "health": "/health",
        "search": "/api/sales"
    }


# Import and include routers
from yardsale.routers import sales

app.include_router(sales.router, prefix="/api", tags=["sales"])
