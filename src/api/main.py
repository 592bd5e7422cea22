"""
FastAPI application for the Lesson Plan Upgrade service
Upload a lesson plan, describe the class, and get methods, games, a simulation and an improvement appendix.
"""
import os
from dotenv import load_dotenv

# Load env vars immediately
load_dotenv()

import traceback
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from api import app_context
from api.dependencies import Settings

# ============= FASTAPI APP SETUP =============
app = FastAPI(
    title="Giáo Án Pro API",
    description="Upgrade existing lesson plans with active teaching methods, games and simulations",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Log unhandled exceptions and return them as JSON"""
    logger.error(f"Unhandled exception: {exc}")
    logger.error(f"Traceback: {traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc)}
    )


@app.on_event("startup")
async def startup_event():
    """Report configuration state on startup"""
    settings = app_context.settings_store.settings
    if settings.needs_configuration:
        logger.warning("Gemini API key missing: clients must configure it via PUT /api/settings")
    else:
        logger.info(f"Gemini configured, preferred model: {settings.model}")
    logger.info(f"Exports written to {app_context.OUTPUT_DIR.resolve()}")


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Giáo Án Pro API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "settings": {
                "get": "GET /api/settings",
                "update": "PUT /api/settings",
                "models": "GET /api/settings/models"
            },
            "documents": {
                "upload": "POST /api/documents",
                "status": "GET /api/documents/{document_id}"
            },
            "lesson_plans": {
                "options": "GET /api/lesson-plans/options",
                "generate": "POST /api/lesson-plans/generate",
                "get": "GET /api/lesson-plans/{result_id}",
                "reset": "DELETE /api/lesson-plans/{result_id}",
                "export_word": "GET /api/lesson-plans/{result_id}/export/word",
                "export_simulation": "GET /api/lesson-plans/{result_id}/export/simulation"
            }
        }
    }


@app.get("/health")
async def health_check(store: Settings):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "gemini_api_configured": not store.settings.needs_configuration
    }


# Import and include routers
from api.routes import settings, documents, lesson_plans

app.include_router(settings.router)
app.include_router(documents.router)
app.include_router(lesson_plans.router)
