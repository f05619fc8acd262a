"""
Name: Back-office ASGI Entrypoint (app.main)

Responsibilities:
  - Re-export the FastAPI app built in app.api.main
  - Keep `uvicorn app.main:app` as the stable import path

Notes:
  - No configuration or IO here; wiring lives in app.api.main and app.container
"""

from app.api.main import app

__all__ = ["app"]
