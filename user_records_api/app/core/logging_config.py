"""
Logging configuration for the User Records API.

``setup_logging`` attaches a console handler, and a file handler when
``LOG_FILE`` is set, to the root logger.  Handlers installed here are
tagged so that repeated calls (``create_app`` runs once per app, tests
build many apps) do not stack duplicates, while handlers owned by
someone else, such as uvicorn or pytest, do not prevent configuration.
"""

import logging
from pathlib import Path
from typing import List, Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_OWNED_FLAG = "_user_records_api_handler"

# psycopg_pool reports every connection it opens or recycles at INFO.
NOISY_LOGGERS = ("psycopg.pool",)


def owned_handlers(logger: logging.Logger) -> List[logging.Handler]:
    """Return the handlers on ``logger`` that ``setup_logging`` installed."""
    return [handler for handler in logger.handlers if getattr(handler, _OWNED_FLAG, False)]


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger for the service.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path of a file that receives the same records as the console.
    """
    root = logging.getLogger()
    if owned_handlers(root):
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    root.setLevel(numeric_level)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _OWNED_FLAG, True)
        root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
