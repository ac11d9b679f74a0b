"""Logging configuration helpers."""

import logging


def configure_logging(app) -> None:
    """Attach a single stream handler to the ``foodtracker`` logger."""
    logger = logging.getLogger("foodtracker")
    logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
