"""Logging configuration for hostsense.

Everything is written to stderr: under ``hostsense serve`` stdout is the MCP
transport and a stray log line there corrupts the JSON-RPC stream.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "mcp.server.lowlevel.server")


def _stderr_handler(formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    return handler


def _daily_file_handler(log_dir: Path, formatter: logging.Formatter) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"hostsense_{datetime.now():%Y%m%d}.log"
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = False,
    log_dir: str | Path | None = None,
) -> logging.Logger:
    """
    Configure the ``hostsense`` logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_to_file: Also write a daily log file
        log_dir: Directory for log files (default: data/logs/)

    Returns:
        The configured ``hostsense`` logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger("hostsense")
    logger.setLevel(numeric_level)

    # Repeated calls (CLI callback, app lifespan) replace handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    logger.addHandler(_stderr_handler(formatter))

    if log_to_file:
        file_handler = _daily_file_handler(Path(log_dir or "data/logs"), formatter)
        logger.addHandler(file_handler)
        logger.info(f"Logging to file: {file_handler.baseFilename}")

    if numeric_level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger(name: str = "hostsense") -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
