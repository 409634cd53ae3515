"""
ICPC Coach - Main Entry Point
=============================

This is the main entry point for the service. It:
1. Loads configuration
2. Creates the shared Codeforces client and registers the tools
3. Creates the agent
4. Serves the HTTP API

Run with:
    python -m icpc_coach.main

Or after installing:
    icpc-coach
"""

import sys

import uvicorn

from icpc_coach.utils.config import get_config, is_codeforces_auth_configured
from icpc_coach.utils.logger import logger

main_logger = logger.child("Main")

# LOG_LEVEL spellings the logger accepts, mapped to uvicorn's level names
UVICORN_LOG_LEVELS = {
    "debug": "debug",
    "info": "info",
    "warn": "warning",
    "warning": "warning",
    "error": "error",
}


def uvicorn_log_level(level: str) -> str:
    """Translate LOG_LEVEL into a level uvicorn accepts, defaulting to info."""
    return UVICORN_LOG_LEVELS.get(level.lower(), "info")


def build_app():
    """Initialize all components and return the HTTP application."""
    main_logger.info("Loading configuration...")
    config = get_config()

    main_logger.info("Connecting Codeforces client...")
    from icpc_coach.codeforces import get_codeforces_client
    get_codeforces_client()
    if is_codeforces_auth_configured():
        main_logger.info("Codeforces API key configured; signed methods enabled")

    main_logger.info("Creating agent...")
    from icpc_coach.agent import Agent
    agent = Agent()
    main_logger.info(f"{len(agent.registry.list_names())} tools available")

    from icpc_coach.server import create_app
    return create_app(agent=agent, static_dir=config.server.static_dir)


def run():
    """
    Synchronous entry point.

    This is called when running with the `icpc-coach` command.
    """
    try:
        app = build_app()
    except Exception as e:
        main_logger.error("Failed to start", e)
        sys.exit(1)

    config = get_config()
    main_logger.info(f"ICPC Coach running at http://{config.server.host}:{config.server.port}")
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=uvicorn_log_level(config.log_level),
    )


if __name__ == "__main__":
    run()
