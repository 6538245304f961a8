# utils/logging.py
import logging
import logging.config
from pathlib import Path
from typing import Optional

LOGGER_NAME = "sitescore"

def setup_logging(
    log_file: Optional[str] = None,
    console: bool = True,
    level: str = "INFO",
    quiet_console: bool = False,
    console_level: Optional[str] = None,
) -> tuple:
    """
    Setup logging with an optional file handler and console output.

    Args:
        log_file: Path of the log file; no file is written when omitted
        console: Whether to enable console logging
        level: Level of the package logger
        quiet_console: If True, only errors reach the console
        console_level: Separate level for console (defaults to level)
    """
    name = LOGGER_NAME

    handlers = {}
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "plain",
            "filename": str(log_file),
            "encoding": "utf-8",
            "mode": "w",
            "level": "DEBUG",   # capture everything in file
        }

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "{asctime} {levelname:<7} {name} - {message}",
                "style": "{",
            },
        },
        "handlers": handlers,
        "loggers": {
            name: {
                "level": level,
                "handlers": list(handlers),
                "propagate": False,
            },
        },
        "root": {"handlers": []},  # keep root empty
    }

    logging.config.dictConfig(config)
    logging.captureWarnings(True)

    logger = logging.getLogger(name)
    console_formatter = logging.Formatter("{levelname:<7} {message}", style="{")

    summary_logger = logging.getLogger(f"{name}.summary")
    summary_logger.setLevel(logging.INFO)
    summary_logger.propagate = False
    for h in list(summary_logger.handlers):
        summary_logger.removeHandler(h)

    if log_file:
        fh_summary = logging.FileHandler(log_file, encoding="utf-8", mode="a")
        fh_summary.setLevel(logging.INFO)
        fh_summary.setFormatter(logging.Formatter("{asctime} SUMMARY - {message}", style="{"))
        summary_logger.addHandler(fh_summary)

    if console:
        console_handler = logging.StreamHandler()
        if quiet_console:
            console_handler.setLevel(logging.ERROR)
        else:
            console_handler.setLevel(getattr(logging, (console_level or level).upper()))
        console_handler.setFormatter(console_formatter)
        if not quiet_console:
            logger.addHandler(console_handler)
        summary_logger.addHandler(console_handler)

    logger.debug("Logging initialised. File: %s", log_file or "<none>")
    return logger, summary_logger
