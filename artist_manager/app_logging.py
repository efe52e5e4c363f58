"""JSON logging for the service."""
import logging
from typing import Union

from pythonjsonlogger import jsonlogger

QUIET = ('sqlalchemy.engine', 'sqlalchemy.pool')
"""Loggers held at WARNING; they echo every statement at INFO."""

SERVER_LOGGERS = ('uvicorn', 'uvicorn.error', 'uvicorn.access')


def setup_logger(level: Union[str, int] = 'INFO') -> None:
    """Send every record through one JSON handler on the root logger.

    Safe to call more than once; later calls only change the level.
    """
    root = logging.getLogger()
    root.setLevel(level)
    if any(getattr(handler, '_artist_manager', False) for handler in root.handlers):
        return

    log_handler = logging.StreamHandler()
    log_handler._artist_manager = True
    formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s',
                                         rename_fields={'levelname': 'level',
                                                        'asctime': 'timestamp'})
    log_handler.setFormatter(formatter)
    root.addHandler(log_handler)

    for name in QUIET:
        logging.getLogger(name).setLevel(logging.WARNING)
    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = []
        server_logger.propagate = True
