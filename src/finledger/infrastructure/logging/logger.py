"""Logging helpers for the ledger.

``LoggerBuilder`` assembles standard-library loggers writing to
``logs/<subdir>/<YYYYMMDD>_<prefix>.log`` under the project root, and the
``Logger`` singletons hand out one shared instance per concern:

* ``AppLogger`` for application diagnostics;
* ``AuditLogger`` for one line per committed ledger mutation.
"""

from datetime import datetime
import logging
from pathlib import Path
from typing import Callable

from finledger.utils.utils import get_project_root

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LoggerBuilder:
    """Fluent builder for file and console loggers."""

    def __init__(self) -> None:
        self._name = "finledger"
        self._subdir = "app"
        self._prefix = "app_logs"
        self._console = False
        self._level = logging.INFO
        self._formatter_factory: Callable[[], logging.Formatter] = (
            LoggerBuilder._default_formatter
        )
        self._file_handler_factory: Callable[
            [Path, logging.Formatter], logging.Handler
        ] = LoggerBuilder._default_file_handler
        self._console_handler_factory: Callable[
            [logging.Formatter], logging.Handler
        ] = LoggerBuilder._default_console_handler
        self._logger: logging.Logger | None = None

    def name(self, name: str) -> "LoggerBuilder":
        """Set the logger name."""
        self._name = name
        return self

    def subdir(self, subdir: str) -> "LoggerBuilder":
        """Set the folder under ``logs/`` receiving the log file."""
        self._subdir = subdir
        return self

    def prefix(self, prefix: str) -> "LoggerBuilder":
        """Set the log file name suffix after the date stamp."""
        self._prefix = prefix
        return self

    def console(self, enabled: bool) -> "LoggerBuilder":
        """Enable or disable the console handler."""
        self._console = enabled
        return self

    def level(self, level: int) -> "LoggerBuilder":
        """Set the logger level."""
        self._level = level
        return self

    def formatter(
        self,
        factory: Callable[[], logging.Formatter],
    ) -> "LoggerBuilder":
        """Set the formatter factory."""
        self._formatter_factory = factory
        return self

    def file_handler(
        self,
        factory: Callable[[Path, logging.Formatter], logging.Handler],
    ) -> "LoggerBuilder":
        """Set the file handler factory."""
        self._file_handler_factory = factory
        return self

    def console_handler(
        self,
        factory: Callable[[logging.Formatter], logging.Handler],
    ) -> "LoggerBuilder":
        """Set the console handler factory."""
        self._console_handler_factory = factory
        return self

    def build(self) -> logging.Logger:
        """Return the configured logger, creating handlers only once.

        Returns:
            logging.Logger: Logger writing to the dated log file.
        """
        if self._logger is not None:
            return self._logger

        logger = logging.getLogger(self._name)
        logger.setLevel(self._level)
        logger.propagate = False

        if not logger.handlers:
            log_dir = get_project_root() / "logs" / self._subdir
            log_dir.mkdir(parents=True, exist_ok=True)
            log_path = log_dir / f"{self._today_stamp()}_{self._prefix}.log"
            fmt = self._formatter_factory()
            logger.addHandler(self._file_handler_factory(log_path, fmt))
            if self._console:
                logger.addHandler(self._console_handler_factory(fmt))

        self._logger = logger
        return logger

    @staticmethod
    def _today_stamp() -> str:
        return datetime.now().strftime("%Y%m%d")

    @staticmethod
    def _default_formatter() -> logging.Formatter:
        return logging.Formatter(DEFAULT_FORMAT)

    @staticmethod
    def _default_file_handler(
        path: Path,
        fmt: logging.Formatter,
    ) -> logging.Handler:
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(logging.INFO)
        handler.setFormatter(fmt)
        return handler

    @staticmethod
    def _default_console_handler(fmt: logging.Formatter) -> logging.Handler:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(fmt)
        return handler


class Logger:
    """Singleton wrapper delegating to a built ``logging.Logger``."""

    _instance: "Logger | None" = None
    _subdir = "app"
    _prefix = "app_logs"
    _console = True

    def __new__(cls, name: str = "finledger"):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance.logger = (
                LoggerBuilder()
                .name(name)
                .subdir(cls._subdir)
                .prefix(cls._prefix)
                .console(cls._console)
                .build()
            )
            cls._instance = instance
        return cls._instance

    def info(self, msg, *args, **kwargs) -> None:
        self.logger.info(msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs) -> None:
        self.logger.warning(msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs) -> None:
        self.logger.error(msg, *args, **kwargs)

    def debug(self, msg, *args, **kwargs) -> None:
        self.logger.debug(msg, *args, **kwargs)

    def critical(self, msg, *args, **kwargs) -> None:
        self.logger.critical(msg, *args, **kwargs)


class AppLogger(Logger):
    """Application diagnostics logger."""

    _instance = None


class AuditLogger(Logger):
    """Ledger mutation audit trail, file only."""

    _instance = None
    _subdir = "audit"
    _prefix = "ledger_audit"
    _console = False


def get_app_logger() -> AppLogger:
    """Return the shared application logger."""
    return AppLogger("finledger.app")


def get_audit_logger() -> AuditLogger:
    """Return the shared audit logger."""
    return AuditLogger("finledger.audit")


__all__ = [
    "LoggerBuilder",
    "Logger",
    "AppLogger",
    "AuditLogger",
    "get_app_logger",
    "get_audit_logger",
]
