#!/usr/bin/env python3
"""
Statekeeper Starter
Starts the state managers, marks the process READY, then serves the status API.
"""

import logging
import signal
import sys

import uvicorn

from statekeeper.app import Application
from statekeeper.helpers.dto.state_dto import AppState
from statekeeper.interfaces.api.api_app import create_api_app

# Configure logging once for the whole process
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def main() -> None:
    application = Application()

    def shutdown_handler(signum, frame):
        """Handle shutdown signals gracefully."""
        logging.info(f"Received signal {signum}, shutting down...")
        application.state_manager.set_main_app_state(AppState.FAULTY)
        application.stop()
        sys.exit(0)

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    logging.info("[Application] Starting Statekeeper...")
    application.start()
    application.state_manager.set_main_app_state(AppState.READY)

    logging.info("[API] Status server at http://%s:%d/status", application.api_host, application.api_port)
    try:
        uvicorn.run(
            create_api_app(application.state_manager),
            host=application.api_host,
            port=application.api_port,
            log_level="info",
        )
    finally:
        logging.info("API server stopped, cleaning up...")
        application.state_manager.set_main_app_state(AppState.FAULTY)
        application.stop()


if __name__ == "__main__":
    main()
