"""ASGI entrypoint for uvicorn."""

from __future__ import annotations

from anomanet.api.app import create_app

app = create_app()
