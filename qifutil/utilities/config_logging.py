# qifutil/utilities/config_logging.py
from __future__ import annotations

import copy
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional

LOG_FILE_NAME = "qifutil.log"

LOGGING: Dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(levelname)s %(name)s: %(message)s"},
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s "
            "[%(process)d:%(threadName)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "WARNING",
            "formatter": "simple",
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "verbose",
            "filename": f"logs/{LOG_FILE_NAME}",
            "maxBytes": 5_000_000,
            "backupCount": 5,
            "encoding": "utf-8",
        },
    },
    "loggers": {
        # root logger
        "": {
            "level": "DEBUG",
            "handlers": ["console", "file"],
        },
    },
}


def configure_logging(log_dir: Optional[Path] = None, verbose: bool = False) -> Dict[str, Any]:
    """
    Apply `LOGGING` via dictConfig.

    The file handler is pointed at ``log_dir`` (created if needed). When
    ``log_dir`` is None the file handler is dropped and only the console
    handler is installed. Returns the dict that was applied.
    """
    config = copy.deepcopy(LOGGING)
    if verbose:
        config["handlers"]["console"]["level"] = "DEBUG"

    if log_dir is None:
        del config["handlers"]["file"]
        config["loggers"][""]["handlers"] = ["console"]
    else:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        config["handlers"]["file"]["filename"] = str(log_dir / LOG_FILE_NAME)

    logging.config.dictConfig(config)
    return config
