#!/usr/bin/env python3
"""
Production entry point for the GeoLink API.

Reads the configuration path from GEOLINK_CONFIG (falling back to config.yaml in
the working directory or defaults), configures logging and serves the API.
`python main.py health` prints a one-shot health report instead.
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from pathlib import Path

import structlog

from geolink.config import load_config
from geolink.container import DependencyContainer
from geolink.observability import configure_logging
from geolink.web.main import run_web_server

logger = structlog.get_logger(__name__)


async def health_check(config_path: Path | None) -> dict:
    """Perform health check for container orchestration."""
    try:
        container = DependencyContainer(config_path=config_path)
        async with container.lifecycle():
            return {"status": "healthy", **container.get_health_status()}
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}


def main() -> None:
    config_env = os.getenv("GEOLINK_CONFIG")
    config_path = Path(config_env) if config_env else None

    if len(sys.argv) > 1 and sys.argv[1] == "health":
        health = asyncio.run(health_check(config_path))
        print(json.dumps(health, indent=2))
        sys.exit(0 if health["status"] == "healthy" else 1)

    config = load_config(config_path)
    configure_logging(config.monitoring)
    logger.info("GeoLink production server starting", version=config.version)
    run_web_server(host=config.monitoring.web_ui.host, port=config.monitoring.web_ui.port, config=config)


if __name__ == "__main__":
    main()
