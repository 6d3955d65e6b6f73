"""Launch script for the battle calculator API."""

import os
from typing import Any, Dict, Optional

import uvicorn

from battle_calc.config import load_settings, settings_to_env
from battle_calc.log import configure_logging

from .app import create_app


def main(settings: Optional[Dict[str, Any]] = None):
    """Start the API server."""
    settings = settings if settings is not None else load_settings()
    server = settings.get("server", {})
    level = str(settings.get("logging", {}).get("level", "INFO"))
    configure_logging(level)

    if server.get("reload"):
        # Reload needs an import string; the factory only sees settings through the environment.
        os.environ.update(settings_to_env(settings))
        target: Any = "battle_calc.api.app:create_app"
        factory = True
    else:
        target = create_app(settings)
        factory = False

    uvicorn.run(
        target,
        factory=factory,
        host=server.get("host", "127.0.0.1"),
        port=int(server.get("port", 8000)),
        reload=bool(server.get("reload", False)),
        log_level=level.lower(),
    )


if __name__ == "__main__":
    main()
