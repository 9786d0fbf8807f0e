"""FastAPI application for the Donjara scoring service."""

from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import load_settings
from ..data.loaders import load_tables
from ..models import ScoringTables
from .routes import router


def create_app(
    settings: Optional[Dict[str, Any]] = None,
    tables: Optional[ScoringTables] = None,
) -> FastAPI:
    """Build the app; catalog and rules are loaded once here and shared by every request."""
    settings = settings or load_settings()
    app = FastAPI(
        title="Donjara Scorer",
        description="Tile matching, wildcard binding and hand scoring",
        version="0.1.0",
    )

    # Add CORS middleware for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.tables = tables or load_tables(settings)

    app.include_router(router, prefix="/api")

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "service": "donjara-scorer", "tiles": len(app.state.tables.catalog)}

    return app
