"""HTTP API for the geo-link resolver."""

from __future__ import annotations

from .main import app, create_app, run_web_server

__all__ = ["app", "create_app", "run_web_server"]
