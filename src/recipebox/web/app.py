"""
Recipe Box Web API - FastAPI application.

Authentication and persistence live in front of / behind this service;
it only extracts, parses and scales.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recipebox import __version__
from recipebox.config import settings
from recipebox.web.recipe_import_routes import router as recipe_import_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Recipe Box", version=__version__)

# CORS middleware for the frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recipe_import_router, prefix="/api")


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
