"""Logging configuration for CNNCT."""
import logging
from pathlib import Path

from cnnct.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(log_dir: Path | None = None) -> Path | None:
    """
    Configure root logging for the application.

    Writes to ``~/.logs/cnnct/latest.log`` unless file logging is disabled
    in settings, in which case records go to stderr.

    Returns the log file path, or None when logging to stderr.
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    if not settings.log_to_file:
        logging.basicConfig(level=level, format=LOG_FORMAT)
        return None

    log_dir = log_dir or Path.home() / ".logs" / "cnnct"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "latest.log"

    logging.basicConfig(level=level, format=LOG_FORMAT, filename=str(log_file))
    logging.getLogger(__name__).info(f"Starting {settings.app_name}")
    return log_file
