"""
Logging for the relay.

Every module logs through ``logging.getLogger(__name__)``; provider
failures are logged with the handler label before they are turned into
the failure envelope, and mirror write failures are logged instead of
failing the request.  ``create_app`` calls :func:`setup_logging` once
with ``LOG_LEVEL`` and ``LOG_FILE`` from the settings.
"""

import logging
from pathlib import Path
from typing import Optional


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Attach console (and optional file) handlers to the root logger.

    A second call is a no-op, so test suites that build many
    applications do not stack handlers.  ``level`` is a level name such
    as ``"DEBUG"``; unknown names fall back to INFO.  httpx request logs
    are kept at WARNING or above since the relay logs its own calls.
    """
    logger = logging.getLogger()
    if logger.handlers:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))
