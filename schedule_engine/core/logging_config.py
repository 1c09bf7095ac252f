"""
Central logging configuration for the schedule engine service.
"""

import logging

# Third-party loggers that are too chatty at INFO/DEBUG.
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "asyncio")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the process.

    Existing handlers (e.g. installed by uvicorn or pytest) are kept; a
    stream handler is only added when the root logger has none.
    """
    root_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(root_level)
        handler.setFormatter(
            logging.Formatter("[%(asctime)s] %(levelname)s - %(name)s - %(message)s")
        )
        root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("schedule_engine").setLevel(root_level)
