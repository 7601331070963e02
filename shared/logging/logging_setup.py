import copy
import logging
import logging.config
import os
from datetime import datetime

from pytz import timezone

LOGGER_NAME = "rag_vector_bridge"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVEL_PREFIXES: dict[int, str] = {
    logging.CRITICAL: "⛔ ",
    logging.ERROR: "⛔ ",
    logging.WARNING: "⚠️ ",
}

_ANSI_RESET = "\033[0m"
_ANSI_COLORS: dict[str, str] = {
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "white": "\033[37m",
}


def _is_debug() -> bool:
    return os.getenv("LOG_LEVEL", "info").strip().lower() == "debug"


class TimezoneFormatter(logging.Formatter):
    """Formats timestamps in the configured timezone and prefixes warnings and errors with a symbol."""

    def __init__(self, tz_name: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.tz = timezone(tz_name)

    def formatTime(self, record, datefmt=None):
        stamp = datetime.fromtimestamp(record.created, self.tz)
        return stamp.strftime(datefmt) if datefmt else stamp.isoformat()

    def format(self, record):
        # every handler formats the same record, so prefix a copy
        prefixed = copy.copy(record)
        prefixed.msg = _LEVEL_PREFIXES.get(record.levelno, "") + record.getMessage()
        prefixed.args = ()
        return super().format(prefixed)


class ConsoleFormatter(TimezoneFormatter):
    """Wraps the line in an ANSI color when the record carries a ``color`` attribute."""

    def format(self, record) -> str:
        line = super().format(record)
        ansi = _ANSI_COLORS.get(getattr(record, "color", None) or "")
        return f"{ansi}{line}{_ANSI_RESET}" if ansi and line else line


class ColorLogger:
    """Logger wrapper whose log methods accept an optional ``color=`` keyword.

    ``logger.info("collection ready", color="green")`` colors the console line;
    the log file always receives plain text.
    """

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _emit(self, level: int, msg, args: tuple, color: str | None, kwargs: dict, exc_info=None) -> None:
        if color is not None:
            kwargs = {**kwargs, "extra": {**(kwargs.get("extra") or {}), "color": color}}
        if exc_info is not None:
            kwargs.setdefault("exc_info", exc_info)
        self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg, *args, color: str | None = None, **kwargs):
        self._emit(logging.DEBUG, msg, args, color, kwargs)

    def info(self, msg, *args, color: str | None = None, **kwargs):
        self._emit(logging.INFO, msg, args, color, kwargs)

    def warning(self, msg, *args, color: str | None = None, **kwargs):
        self._emit(logging.WARNING, msg, args, color, kwargs)

    def error(self, msg, *args, color: str | None = None, **kwargs):
        self._emit(logging.ERROR, msg, args, color, kwargs)

    def critical(self, msg, *args, color: str | None = None, **kwargs):
        self._emit(logging.CRITICAL, msg, args, color, kwargs)

    def exception(self, msg, *args, color: str | None = None, **kwargs):
        self._emit(logging.ERROR, msg, args, color, kwargs, exc_info=True)

    def log(self, level: int, msg, *args, color: str | None = None, **kwargs):
        self._emit(level, msg, args, color, kwargs)

    def __getattr__(self, name):
        # setLevel, handlers, isEnabledFor, ...
        return getattr(self._logger, name)


def setup_logging() -> ColorLogger:
    """Configure the root logger from LOG_LEVEL, TIMEZONE, LOG_TO_FILE and ROOT_DIR.

    Console output is colored; with LOG_TO_FILE enabled (default) a plain copy
    goes to <ROOT_DIR>/logs/app.log.
    """
    level = logging.DEBUG if _is_debug() else logging.INFO
    tz_name = os.getenv("TIMEZONE", "Europe/Berlin")
    formatter_kwargs = {"format": LOG_FORMAT, "datefmt": DATE_FORMAT, "tz_name": tz_name}

    handlers: dict = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "level": level,
            "stream": "ext://sys.stdout",
        },
    }
    if os.getenv("LOG_TO_FILE", "true").strip().lower() in ("true", "1", "yes"):
        log_dir = os.path.join(os.getenv("ROOT_DIR", os.getcwd()), "logs")
        os.makedirs(log_dir, exist_ok=True)
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "plain",
            "level": level,
            "filename": os.path.join(log_dir, "app.log"),
            "encoding": "utf-8",
        }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {"()": TimezoneFormatter, **formatter_kwargs},
            "console": {"()": ConsoleFormatter, **formatter_kwargs},
        },
        "handlers": handlers,
        "root": {"handlers": list(handlers), "level": level},
    })

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(level if level == logging.DEBUG else logging.WARNING)

    return ColorLogger(logging.getLogger(LOGGER_NAME))
