import logging
import logging.config
import os
from datetime import datetime
from typing import Any, Dict
from app.core.config import settings

# One rotating file per stream: logs/<stream>/<stream>-<date>.log
LOG_STREAMS = ("app", "error", "access", "audit", "catalog")

FORMATTERS = {
    "default": {
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "datefmt": "%Y-%m-%d %H:%M:%S",
    },
    "detailed": {
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s:%(lineno)d - %(message)s",
        "datefmt": "%Y-%m-%d %H:%M:%S",
    },
    "access": {
        "format": "%(asctime)s - %(message)s",
        "datefmt": "%Y-%m-%d %H:%M:%S",
    },
}


def _file_handler(log_dir: str, stream: str, level: str, formatter: str = "detailed") -> Dict[str, Any]:
    current_date = datetime.now().strftime("%Y-%m-%d")
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": os.path.join(log_dir, stream, f"{stream}-{current_date}.log"),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
    }


def _logger(*handlers: str, level: str = "INFO") -> Dict[str, Any]:
    return {"level": level, "handlers": list(handlers), "propagate": False}


def setup_logging():
    """Setup application logging configuration"""
    log_dir = settings.LOG_DIR
    for stream in LOG_STREAMS:
        os.makedirs(os.path.join(log_dir, stream), exist_ok=True)

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "default",
            "stream": "ext://sys.stdout",
        },
        "app_file": _file_handler(log_dir, "app", settings.LOG_LEVEL),
        "error_file": _file_handler(log_dir, "error", "ERROR"),
        "access_file": _file_handler(log_dir, "access", "INFO", formatter="access"),
        # Audit writes and hierarchy moves/repairs get their own trail
        "audit_file": _file_handler(log_dir, "audit", "INFO"),
        "catalog_file": _file_handler(log_dir, "catalog", "INFO"),
    }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": FORMATTERS,
        "handlers": handlers,
        "loggers": {
            "": _logger("console", "app_file", "error_file", level=settings.LOG_LEVEL),
            "app.services.audit": _logger("audit_file", "console", "error_file"),
            "app.services.catalog": _logger("catalog_file", "app_file", "console", "error_file"),
            "access": _logger("access_file"),
            "uvicorn.access": _logger("access_file"),
            "sqlalchemy.engine": _logger("app_file", level="WARNING"),
        },
    })

    logger = logging.getLogger(__name__)
    logger.info(f"Store back office logging configured (level={settings.LOG_LEVEL}, dir={log_dir})")
