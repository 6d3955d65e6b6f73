"""FastAPI application for the battle calculator."""

from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from battle_calc import __version__
from battle_calc.catalog import UnitCatalog, load_catalog
from battle_calc.config import load_settings

from .api_routes import router


def create_app(
    settings: Optional[Dict[str, Any]] = None,
    catalog: Optional[UnitCatalog] = None,
) -> FastAPI:
    """Build the app.  The catalog is loaded here, so a bad catalog fails startup."""
    settings = settings if settings is not None else load_settings()
    if catalog is None:
        catalog = load_catalog(settings.get("catalog", {}).get("path"))

    app = FastAPI(
        title="Battle Calculator",
        description="Combat outcomes and attack order optimisation",
        version=__version__,
    )

    # Add CORS middleware for browser clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.catalog = catalog

    app.include_router(router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "service": "battle-calc"}

    return app
