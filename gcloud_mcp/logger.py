import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from loguru import logger as _logger


_print_level = "INFO"

LOG_FORMAT = "[{time:YYYY-MM-DD[T]HH:mm:ss.SSS!UTC}Z] {level}: {message}"


def resolve_level(level: str, default: str = "INFO") -> str:
    """Return ``level`` if loguru knows it, otherwise ``default``."""
    try:
        _logger.level(level)
    except (TypeError, ValueError):
        return default
    return level


def define_log_level(
    print_level: str = "INFO",
    logfile_level: str = "DEBUG",
    name: Optional[str] = None,
    log_dir: Optional[Union[str, Path]] = None,
):
    """Configure the server logger.

    Records always go to stderr, since stdout carries the MCP stdio protocol.
    When ``log_dir`` is given, a timestamped log file is written there as well.
    """

    global _print_level
    requested_level = print_level
    print_level = resolve_level(print_level)
    logfile_level = resolve_level(logfile_level, default="DEBUG")
    _print_level = print_level

    _logger.remove()
    _logger.add(sys.stderr, level=print_level, format=LOG_FORMAT)

    if log_dir is not None:
        current_date = datetime.now()
        formatted_date = current_date.strftime("%Y%m%d%H%M%S")
        log_name = f"{name}_{formatted_date}" if name else formatted_date

        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        _logger.add(log_path / f"{log_name}.log", level=logfile_level, format=LOG_FORMAT)

    if print_level != requested_level:
        _logger.warning(f"Unknown log level {requested_level!r}, using {print_level}")

    return _logger


logger = define_log_level(
    print_level=os.environ.get("GCLOUD_MCP_LOG_LEVEL", "INFO").upper(),
    log_dir=os.environ.get("GCLOUD_MCP_LOG_DIR"),
    name="gcloud-mcp",
)
