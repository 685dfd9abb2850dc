"""
Centralized logging configuration for the kill-on-startup coordinator.

Provides a single setup_logging function that configures:
- Console output (quiet when the host GUI owns stdout)
- Optional file output to {log_dir}/{service_name}.log
- Fresh log file on each start unless KILL_ON_STARTUP_LOG_APPEND is set
"""

import logging
import logging.handlers
import sys
import threading
from pathlib import Path
from typing import Optional

from kill_on_startup.config import env_bool, env_str

# Thread-safe lock for logging configuration
_config_lock = threading.Lock()
_MODULE_LOGGER = logging.getLogger(__name__)
_UNKNOWN_LOGGER_NAME = "<unknown>"

LOG_DIR_ENV = "KILL_ON_STARTUP_LOG_DIR"
LOG_APPEND_ENV = "KILL_ON_STARTUP_LOG_APPEND"
QUIET_CONSOLE_ENV = "KILL_ON_STARTUP_QUIET_CONSOLE"

_TECHNICAL_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _close_handlers(logger: logging.Logger, logger_name: Optional[str] = None) -> None:
    """Close all handlers for a logger, logging any errors."""
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as e:
            safe_name = logger_name if logger_name else _UNKNOWN_LOGGER_NAME
            _MODULE_LOGGER.debug("Handler close failed for logger '%s': %s", safe_name, e)


def _reset_all_handlers(root_logger: logging.Logger) -> None:
    _close_handlers(root_logger)
    root_logger.handlers = []


def _build_console_handler(quiet: bool) -> logging.Handler:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(_TECHNICAL_FORMAT, _DATE_FORMAT))
    console_handler.setLevel(logging.CRITICAL + 1 if quiet else logging.DEBUG)
    return console_handler


def _configure_file_handler(service_name: Optional[str], log_dir: Optional[Path]) -> Optional[logging.Handler]:
    if not service_name or log_dir is None:
        return None

    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"{service_name}.log"
    file_mode = "a" if env_bool(LOG_APPEND_ENV, or_value=False) else "w"

    handler_cls = getattr(logging.handlers, "WatchedFileHandler", logging.FileHandler)
    file_handler = handler_cls(log_path, mode=file_mode)
    file_handler.setFormatter(logging.Formatter(_TECHNICAL_FORMAT, _DATE_FORMAT))
    file_handler.setLevel(logging.INFO)
    return file_handler


def _resolve_log_dir(log_dir: Optional[Path]) -> Optional[Path]:
    if log_dir is not None:
        return log_dir.expanduser()
    configured = env_str(LOG_DIR_ENV)
    if not configured:
        return None
    return Path(configured).expanduser()


def _suppress_noisy_third_parties() -> None:
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("psutil").setLevel(logging.WARNING)


def setup_logging(service_name: Optional[str] = "kill_on_startup", *, log_dir: Optional[Path] = None, level: int = logging.INFO) -> None:
    """Configure root logging for the coordinator host process."""

    with _config_lock:
        root_logger = logging.getLogger()
        _reset_all_handlers(root_logger)

        quiet = bool(env_bool(QUIET_CONSOLE_ENV, or_value=False))
        root_logger.addHandler(_build_console_handler(quiet))

        file_handler = _configure_file_handler(service_name, _resolve_log_dir(log_dir))
        if file_handler:
            root_logger.addHandler(file_handler)

        root_logger.setLevel(level)
        _suppress_noisy_third_parties()


__all__ = ["setup_logging"]
