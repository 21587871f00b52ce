import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Per-logger defaults; LOG_LEVELS in the environment overrides them
DEFAULT_LOGGER_LEVELS = {
    "uvicorn.access": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "sqlalchemy.engine": "WARNING",
    # one line per site and keyword is enough unless a selector breaks
    "jobguide.services.job_scraper": "INFO",
    "jobguide.errors": "INFO",
}


def _to_level(value: int | str | None, default: int = logging.INFO) -> int:
    if isinstance(value, int):
        return value
    return getattr(logging, (value or "").strip().upper(), default)


def parse_logger_levels(spec: str | None) -> dict[str, int]:
    """Parse ``"name=LEVEL,name=LEVEL"``; malformed pairs are ignored."""
    levels = {}
    for pair in (spec or "").split(","):
        name, sep, level = pair.partition("=")
        if sep and name.strip() and level.strip():
            levels[name.strip()] = _to_level(level)
    return levels


def setup_logging(level: int | str | None = None, logger_levels: str | None = None) -> None:
    """Configure the root logger for the API, scripts and the scraper loop."""
    from jobguide.config import settings

    root_level = _to_level(level if level is not None else settings.log_level)
    overrides = parse_logger_levels(logger_levels if logger_levels is not None else settings.log_levels)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.setLevel(root_level)
    if root.handlers:
        root.handlers.clear()
    root.addHandler(handler)

    for name, default in DEFAULT_LOGGER_LEVELS.items():
        logging.getLogger(name).setLevel(_to_level(default))
    for name, value in overrides.items():
        logging.getLogger(name).setLevel(value)
