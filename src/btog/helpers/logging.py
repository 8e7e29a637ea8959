"""Logger module.

Dashboard JSON is written to stdout, so log records go to stderr unless a
caller explicitly asks for stdout.
"""

import logging
import sys

import colorlog

loggers: dict[str, logging.Logger] = {}

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _resolve_level(log_level: str) -> int:
    level = LOG_LEVELS.get(log_level.upper())
    if level is None:
        err_msg = f"Invalid log level: {log_level}"
        raise ValueError(err_msg)
    return level


def _color_formatter() -> colorlog.ColoredFormatter:
    return colorlog.ColoredFormatter(f"%(log_color)s {LOG_FORMAT}", log_colors=LOG_COLORS)


def get_logger(
    name: str,
    log_handler: str = "stderr",
    log_level: str = "INFO",
    log_color: bool = False,
) -> logging.Logger:
    """Get logger.

    Args:
        name: The name of the logger.
        log_handler: The log handler type ('stderr' or 'stdout').
        log_level: The logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL').
        log_color: Whether to use colored output.

    Returns:
        logging.Logger: Configured logger instance.

    Raises:
        ValueError: If invalid handler or log level is provided.
    """
    if name in loggers:
        return loggers[name]

    streams = {"stderr": sys.stderr, "stdout": sys.stdout}
    if log_handler not in streams:
        err_msg = f"Invalid handler: {log_handler}"
        raise ValueError(err_msg)

    level = _resolve_level(log_level)

    logger = logging.getLogger(name) if not log_color else colorlog.getLogger(name)

    if not log_color:
        handler = logging.StreamHandler(streams[log_handler])
        formatter = logging.Formatter(LOG_FORMAT)
    else:
        handler = colorlog.StreamHandler(streams[log_handler])
        formatter = _color_formatter()

    logger.setLevel(level)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    loggers[name] = logger
    return logger


def configure_logging(log_level: str = "INFO", *, log_color: bool = False) -> None:
    """Apply a level (and optionally colour) to every logger created so far.

    Module loggers are created at import time with the default level; the
    CLI calls this once its flags are parsed.

    Args:
        log_level: The logging level name.
        log_color: Whether to switch handlers to colored output.

    Raises:
        ValueError: If an invalid log level is provided.
    """
    level = _resolve_level(log_level)

    for logger in loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
            if log_color and isinstance(handler, logging.StreamHandler):
                handler.setFormatter(_color_formatter())


__all__ = ["LOG_COLORS", "LOG_LEVELS", "configure_logging", "get_logger"]
