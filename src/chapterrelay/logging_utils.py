"""Console and debug-file logging for ChapterRelay runs."""

import logging
import sys
import time
from logging import FileHandler
from pathlib import Path

_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
_DEBUG_LOG_NAME = "debug.log"
# SDK loggers that report every HTTP request at INFO.
_SDK_LOGGERS = ("httpx", "google_genai")


class _UTCMicrosecondFormatter(logging.Formatter):
    """Render record times as UTC ISO 8601 with microseconds and a 'Z' suffix."""

    converter = time.gmtime

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Return e.g. '2024-05-01T12:00:00.123456Z'."""
        stamp = time.strftime(datefmt or self.default_time_format, self.converter(record.created))
        micros = int((record.created % 1) * 1_000_000)
        return f"{stamp}.{micros:06d}Z"


class ConsoleFormatter(_UTCMicrosecondFormatter):
    """Short progress lines tagged with the application version."""

    def __init__(self, version: str) -> None:
        """Build the console format for `version`."""
        super().__init__(fmt=f"%(asctime)s | ChapterRelay - {version} | %(message)s", datefmt=_DATE_FORMAT)


class FileFormatter(_UTCMicrosecondFormatter):
    """Detailed lines with logger, function, line number and level."""

    def __init__(self) -> None:
        """Build the debug-file format."""
        super().__init__(
            fmt="%(asctime)s | %(name)-28s | %(funcName)-24s:%(lineno)-4d | %(levelname)-8s | %(message)s",
            datefmt=_DATE_FORMAT,
        )


def _attach_debug_file(root_logger: logging.Logger, log_dir: Path) -> None:
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file_path = log_dir / _DEBUG_LOG_NAME
        file_handler = FileHandler(log_file_path, mode="w", encoding="utf-8")
    except OSError:
        root_logger.exception("Could not open the debug log in %s; logging to the console only.", log_dir)
        return

    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(FileFormatter())
    root_logger.addHandler(file_handler)
    root_logger.info("Debug logging enabled; writing details to %s", log_file_path)


def setup_logging(version: str, *, debug: bool = False, log_dir: Path | None = None) -> None:
    """
    Replace the root logger's handlers with ChapterRelay's.

    The console always gets INFO-level progress (DEBUG with `debug`). In debug
    mode with a `log_dir`, every record is also written to `<log_dir>/debug.log`.
    A log file that cannot be opened is reported and otherwise ignored.

    Args:
        version: The application version shown in console lines.
        debug: Lower all levels to DEBUG and enable the debug file.
        log_dir: Directory for the debug file.

    """
    level = logging.DEBUG if debug else logging.INFO
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ConsoleFormatter(version))
    root_logger.addHandler(console_handler)

    for name in _SDK_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

    if debug and log_dir is not None:
        _attach_debug_file(root_logger, log_dir)
