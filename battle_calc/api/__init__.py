"""Battle calculator HTTP API

Serves the unit catalog, direct battle simulation and attack order
optimisation over JSON.

Usage:
    python -m battle_calc.api.run

Then POST battle requests to http://localhost:8000/battle or /optim.
"""

from .app import create_app

__all__ = ["create_app"]
