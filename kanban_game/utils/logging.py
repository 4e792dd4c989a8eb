# ABOUTME: Structured logging configuration using loguru for the engine, relay and sync client.
# ABOUTME: Supports context fields (session, round, player_id, room) and console/file output.

import sys
from pathlib import Path
from typing import Any

from loguru import logger


# Default log format with structured context
DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level> | "
    "{extra}"
)

VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def setup_logging(
    log_level: str = "INFO",
    log_dir: str | Path | None = None,
    console_output: bool = True,
    file_output: bool = False,
    format_string: str | None = None,
    rotation: str = "50 MB",
    retention: str = "14 days",
    compression: str = "zip"
) -> None:
    """
    Configure loguru for the game processes.

    Usage:
        >>> setup_logging(log_level="DEBUG")
        >>> from loguru import logger
        >>> logger.bind(room="r1").info("Client joined")

    Args:
        log_level: Minimum log level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        log_dir: Directory for log files (default: "logs")
        console_output: Enable console logging (default: True)
        file_output: Enable file logging (default: False)
        format_string: Custom format string (default: structured format)
        rotation: When to rotate log files
        retention: How long to keep old logs
        compression: Compression for rotated logs

    Raises:
        ValueError: If log_level is invalid
    """
    log_level = log_level.upper()
    if log_level not in VALID_LEVELS:
        raise ValueError(
            f"Invalid log level: '{log_level}'. "
            f"Must be one of: {', '.join(sorted(VALID_LEVELS))}"
        )

    # Remove default handler
    logger.remove()

    fmt = format_string or DEFAULT_FORMAT

    if console_output:
        logger.add(
            sys.stderr,
            format=fmt,
            level=log_level,
            colorize=True,
            backtrace=True,
            diagnose=False,
        )

    if file_output:
        log_dir = Path("logs") if log_dir is None else Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / "kanban_game_{time:YYYY-MM-DD}.log"
        logger.add(
            str(log_file),
            format=fmt,
            level=log_level,
            rotation=rotation,
            retention=retention,
            compression=compression,
            backtrace=True,
            diagnose=False,
            enqueue=True,  # Thread-safe
        )

    logger.info(
        f"Logging configured: level={log_level}, "
        f"console={console_output}, file={file_output}"
    )


def log_game_event(
    message: str,
    session: int,
    round_number: int,
    player_id: int | None = None,
    level: str = "INFO",
    **extra_context: Any
) -> None:
    """
    Log an engine event with the standard game context fields.

    Usage:
        >>> log_game_event(
        ...     "Blockers placed",
        ...     session=1,
        ...     round_number=3,
        ...     ticket_ids=["4", "7"]
        ... )

    Args:
        message: Log message
        session: Current session (1 or 2)
        round_number: Current round (1-10)
        player_id: Optional acting player
        level: Log level (default: "INFO")
        **extra_context: Additional context fields
    """
    context = {
        "session": session,
        "round": round_number,
        **extra_context
    }

    if player_id is not None:
        context["player_id"] = player_id

    bound_logger = logger.bind(**context)

    level = level.upper()
    if level == "DEBUG":
        bound_logger.debug(message)
    elif level == "WARNING":
        bound_logger.warning(message)
    elif level == "ERROR":
        bound_logger.error(message)
    else:
        bound_logger.info(message)
