# sdk/server.py
"""
Stable import path for the lapwatch HTTP API:
    uvicorn sdk.server:app
Set LAPWATCH_UI_MODULE to serve a different module that exports `app`.
"""

from importlib import import_module
import os

UI_API_MODULE = os.environ.get("LAPWATCH_UI_MODULE", "apps.ui_api.main")

try:
    app = getattr(import_module(UI_API_MODULE), "app")
except (ImportError, AttributeError) as exc:
    raise RuntimeError(
        f"Failed to import the lapwatch API from '{UI_API_MODULE}'; "
        "the module must exist and export `app` (a FastAPI instance)."
    ) from exc
