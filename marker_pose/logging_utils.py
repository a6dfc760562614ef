import logging
import os
from typing import Optional

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

TRACKER_FORMAT = "%(asctime)s %(levelname)s [%(camera)s] %(name)s: %(message)s"


def parse_level(name: str) -> int:
    level = LOG_LEVELS.get(str(name).upper())
    if level is None:
        raise ValueError(f"unknown log level {name!r}, expected one of {sorted(LOG_LEVELS)}")
    return level


class CameraNameFilter(logging.Filter):
    """Tags records with the camera whose frames the tracker is processing."""

    def __init__(self, camera_name: str):
        super().__init__()
        self.camera_name = camera_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.camera = self.camera_name
        return True


def _handler(handler: logging.Handler, camera_name: str, fmt: str) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt))
    handler.addFilter(CameraNameFilter(camera_name))
    return handler


def tracker_logger(
    camera_name: str,
    level: str = "INFO",
    log_path: Optional[str] = None,
    fmt: str = TRACKER_FORMAT,
) -> logging.Logger:
    """
    Logger for one camera's tracker, `marker_pose.tracker.<camera_name>`.

    A console handler is added once; `log_path` adds a file handler unless
    one for the same file is already attached.
    """
    logger = logging.getLogger(f"marker_pose.tracker.{camera_name}")
    logger.setLevel(parse_level(level))

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        logger.addHandler(_handler(logging.StreamHandler(), camera_name, fmt))

    if log_path is not None:
        target = os.path.abspath(log_path)
        if not any(getattr(h, "baseFilename", None) == target for h in logger.handlers):
            logger.addHandler(_handler(logging.FileHandler(target), camera_name, fmt))

    return logger
