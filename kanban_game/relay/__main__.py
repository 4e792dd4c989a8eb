# ABOUTME: Entry point for running the relay server with uvicorn.
# ABOUTME: Run with: python -m kanban_game.relay (PORT / HOST from the environment or .env).

import uvicorn

from kanban_game.config.settings import get_settings
from kanban_game.relay.server import create_app
from kanban_game.utils.logging import setup_logging


def main() -> None:
    """Start the relay with the configured host, port and logging"""
    settings = get_settings()
    setup_logging(
        log_level=settings.log_level,
        log_dir=settings.log_dir,
        file_output=settings.log_to_file,
    )
    uvicorn.run(create_app(), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
