"""Logging setup applied when the application starts."""

import logging

from board_realtime.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger using ``LOG_LEVEL`` unless ``level`` is given."""

    resolved = (level or get_settings().log_level).upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("board_realtime").setLevel(resolved)
