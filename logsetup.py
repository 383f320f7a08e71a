# logsetup.py

import logging
import os

LOGGER_NAME = "collection_graph"
LOG_ENV_VAR = "COLLECTION_GRAPH_LOG"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

logger = logging.getLogger(LOGGER_NAME)


def configure_logging(level=None):
    """
    Attach a stream handler to the project logger.
    Level: argument, else $COLLECTION_GRAPH_LOG, else INFO.
    """
    if level is None:
        level = os.environ.get(LOG_ENV_VAR, "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
        level = resolved

    if not any(getattr(h, "_collection_graph", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._collection_graph = True
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
