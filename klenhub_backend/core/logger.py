import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from .config import PROJECT_DIR, settings


LOGS_DIR: Path = PROJECT_DIR / "logs"
LOGGER_PREFIX = "klenhub_backend."


def _ensure_logs_dir_exists() -> None:
    try:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
    except OSError:
        # Unwritable logs dir: handlers will fail on their own, startup should not
        pass


_LOGGING_ENABLED_CACHE: bool | None = None


def set_logging_enabled(enabled: bool) -> None:
    global _LOGGING_ENABLED_CACHE
    _LOGGING_ENABLED_CACHE = bool(enabled)


def _build_file_handler(component_name: str) -> logging.Handler:
    _ensure_logs_dir_exists()
    log_file = LOGS_DIR / f"{component_name}.log"
    file_handler = TimedRotatingFileHandler(
        filename=str(log_file), when="midnight", backupCount=7, encoding="utf-8"
    )
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(formatter)
    return file_handler


def apply_logging_configuration(enabled: bool) -> None:
    """Apply logging on/off to all existing component loggers at runtime."""
    set_logging_enabled(enabled)

    # loggerDict may contain PlaceHolder objects; get real logger via getLogger
    for logger_name in list(logging.root.manager.loggerDict):
        if not isinstance(logger_name, str) or not logger_name.startswith(
            LOGGER_PREFIX
        ):
            continue

        logger = logging.getLogger(logger_name)

        # Remove existing handlers and close them to release file locks
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

        logger.setLevel(logging.INFO)
        logger.propagate = False

        if enabled:
            component = logger_name[len(LOGGER_PREFIX):]
            logger.addHandler(_build_file_handler(component))
        else:
            logger.addHandler(logging.NullHandler())


def _get_logging_enabled() -> bool:
    if _LOGGING_ENABLED_CACHE is not None:
        return _LOGGING_ENABLED_CACHE
    return settings.LOGGER


def get_component_logger(component_name: str) -> logging.Logger:
    """Return a configured logger for a given component.

    - Writes into logs/<component_name>.log if logging is enabled
    - Uses daily rotation, keeps 7 backups
    - Non-propagating to avoid duplicate logs
    """
    logger = logging.getLogger(f"{LOGGER_PREFIX}{component_name}")

    if getattr(logger, "_is_configured", False):
        return logger

    logger.setLevel(logging.INFO)

    if _get_logging_enabled():
        logger.addHandler(_build_file_handler(component_name))
    else:
        logger.addHandler(logging.NullHandler())

    logger.propagate = False
    setattr(logger, "_is_configured", True)
    return logger
