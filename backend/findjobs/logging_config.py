"""Logging setup for the Find Jobs backend."""

import logging

LOGGER_NAME = "findjobs"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the ``findjobs`` logger hierarchy.

    Safe to call more than once: the stream handler is only attached the
    first time, later calls just adjust the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not any(getattr(h, "_findjobs_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._findjobs_handler = True
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``findjobs`` namespace."""
    if name != LOGGER_NAME and not name.startswith(f"{LOGGER_NAME}."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def log_auth_event(logger: logging.Logger, event: str, email: str | None, success: bool = True) -> None:
    """Log a single authentication event line."""
    outcome = "ok" if success else "denied"
    logger.info(f"AUTH {event} | email={email or '-'} | {outcome}")
