"""
Structured logging for analysis runs.

A :class:`StructuredLogger` owns a standard library logger and attaches
handlers to it: a console handler, an in-memory handler keeping the most
recent :class:`LogEntry` records in a ring buffer and, when a log directory
is configured, a plain text file and a JSON-lines file.

Entries written through the structured API carry their context, operation
and duration. Records emitted by child loggers (``algokit.performance``,
``algokit.complexity``) propagate to the same handlers and are converted to
entries on the way, so slow operation warnings and classification results
show up in the recent entries and the JSON log as well.
"""

import json
import logging
import time
from datetime import datetime, timezone
from functools import wraps
from pathlib import Path
from typing import Any, Callable, List, Optional, Union, TypeVar, cast

from ...containers.ring_buffer import RingBuffer
from ...types.models import LogEntry, LogLevel

F = TypeVar('F', bound=Callable[..., Any])

CONSOLE_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Attribute carrying the LogEntry on a LogRecord
ENTRY_ATTR = 'structured_entry'


def _parse_level(level: Union[LogLevel, str]) -> LogLevel:
    if isinstance(level, LogLevel):
        return level
    try:
        return LogLevel[level.upper()]
    except KeyError:
        valid_levels = ", ".join(member.name for member in LogLevel)
        raise ValueError(f"Invalid log level: {level}. Valid levels are: {valid_levels}") from None


def _to_logging_level(level: LogLevel) -> int:
    return logging.getLevelName(level.value)


def entry_from_record(record: logging.LogRecord) -> LogEntry:
    """
    LogEntry for a log record.

    Records written through :class:`StructuredLogger` already carry their
    entry; plain records get one built from the message, with the emitting
    logger's name as context.
    """
    entry = getattr(record, ENTRY_ATTR, None)
    if entry is not None:
        return entry

    try:
        level = LogLevel[record.levelname]
    except KeyError:
        level = LogLevel.INFO
    return LogEntry(
        timestamp=datetime.fromtimestamp(record.created, timezone.utc),
        level=level,
        message=record.getMessage(),
        context={'logger': record.name},
    )


class RecentEntriesHandler(logging.Handler):
    """Keeps the newest entries in a ring buffer, evicting the oldest."""

    def __init__(self, capacity: int):
        super().__init__()
        self.entries: RingBuffer[LogEntry] = RingBuffer(capacity)

    def emit(self, record: logging.LogRecord) -> None:
        self.entries.push_evicting(entry_from_record(record))


class EntryTextFormatter(logging.Formatter):
    """One line per entry: timestamp, level, message, context and timing."""

    def format(self, record: logging.LogRecord) -> str:
        entry = entry_from_record(record)
        parts = [f"[{entry.timestamp.strftime(DATE_FORMAT)}] [{entry.level.value}] {entry.message}"]
        if entry.context:
            parts.append("(" + " ".join(f"{k}={v}" for k, v in entry.context.items()) + ")")
        if entry.operation and entry.duration_ms is not None:
            parts.append(f"[operation={entry.operation}, duration={entry.duration_ms:.2f}ms]")
        if entry.error:
            parts.append(f"[error={entry.error}]")
        return " ".join(parts)


class EntryJsonFormatter(logging.Formatter):
    """JSON object per entry, for the ``.jsonl`` log."""

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(entry_from_record(record).to_dict(), default=str)


class _LevelMethods:
    """Convenience level methods shared by StructuredLogger and ContextLogger."""

    def log(self, level: LogLevel, message: str, operation: Optional[str] = None,
            duration_ms: Optional[float] = None, error: Optional[Union[str, Exception]] = None,
            **context: Any) -> None:
        raise NotImplementedError

    def debug(self, message: str, **context: Any) -> None:
        self.log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self.log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self.log(LogLevel.WARNING, message, **context)

    def error(self, message: str, error: Optional[Union[str, Exception]] = None, **context: Any) -> None:
        self.log(LogLevel.ERROR, message, error=error, **context)

    def critical(self, message: str, error: Optional[Union[str, Exception]] = None, **context: Any) -> None:
        self.log(LogLevel.CRITICAL, message, error=error, **context)

    def performance(self, operation: str, duration_ms: float, **context: Any) -> None:
        """
        Log how long an operation took.

        Args:
            operation: Operation name, e.g. ``analyze.merge-sort``
            duration_ms: Duration in milliseconds
            **context: Context key-value pairs
        """
        self.log(
            LogLevel.INFO,
            f"Performance: {operation} completed in {duration_ms:.2f}ms",
            operation=operation,
            duration_ms=duration_ms,
            **context
        )


class StructuredLogger(_LevelMethods):
    """
    Logger writing entries to the console, memory and optional log files.

    Creating a StructuredLogger replaces any handlers previously installed
    on the logger of the same name.

    Attributes:
        name (str): Name of the underlying ``logging`` logger
        level (LogLevel): Minimum level written
        log_dir (Optional[Path]): Directory of ``{name}.log`` and ``{name}.jsonl``
    """

    def __init__(
        self,
        name: str,
        level: Union[LogLevel, str] = LogLevel.INFO,
        log_dir: Optional[Union[str, Path]] = None,
        max_memory_entries: int = 1000
    ):
        """
        Initialize the logger and its handlers.

        Args:
            name: Logger name
            level: Log level (default: INFO)
            log_dir: Directory for log files (default: console and memory only)
            max_memory_entries: Number of recent entries kept in memory

        Raises:
            ValueError: If invalid log level is provided
        """
        self.name = name
        self.level = _parse_level(level)
        self.log_dir = Path(log_dir) if log_dir is not None else None
        self._logger = logging.getLogger(name)
        self._recent = RecentEntriesHandler(max_memory_entries)
        self._install_handlers()

    @property
    def memory_buffer(self) -> RingBuffer[LogEntry]:
        return self._recent.entries

    def _install_handlers(self) -> None:
        self.close()

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
        handlers: List[logging.Handler] = [console_handler, self._recent]

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            text_handler = logging.FileHandler(self.log_dir / f"{self.name}.log", encoding="utf-8")
            text_handler.setFormatter(EntryTextFormatter())
            json_handler = logging.FileHandler(self.log_dir / f"{self.name}.jsonl", encoding="utf-8")
            json_handler.setFormatter(EntryJsonFormatter())
            handlers.extend([text_handler, json_handler])

        for handler in handlers:
            self._logger.addHandler(handler)
        self.set_level(self.level)

    def set_level(self, level: Union[LogLevel, str]) -> None:
        """
        Change the minimum level on the logger and all of its handlers.

        Raises:
            ValueError: If invalid log level is provided
        """
        self.level = _parse_level(level)
        numeric_level = _to_logging_level(self.level)
        self._logger.setLevel(numeric_level)
        for handler in self._logger.handlers:
            handler.setLevel(numeric_level)

    def with_context(self, **context: Any) -> 'ContextLogger':
        """Logger that adds context to every entry."""
        return ContextLogger(self, context)

    def log(
        self,
        level: LogLevel,
        message: str,
        operation: Optional[str] = None,
        duration_ms: Optional[float] = None,
        error: Optional[Union[str, Exception]] = None,
        **context: Any
    ) -> None:
        """
        Write an entry at the given level.

        Args:
            level: Log level
            message: Log message
            operation: Operation name for performance entries (optional)
            duration_ms: Operation duration in milliseconds (optional)
            error: Error message or exception (optional)
            **context: Additional context key-value pairs
        """
        numeric_level = _to_logging_level(level)
        if not self._logger.isEnabledFor(numeric_level):
            return

        if isinstance(error, Exception):
            error = f"{type(error).__name__}: {error}"

        entry = LogEntry(
            timestamp=datetime.now(timezone.utc),
            level=level,
            message=message,
            context=context,
            operation=operation,
            duration_ms=duration_ms,
            error=str(error) if error is not None else None
        )
        self._logger.log(numeric_level, message, extra={ENTRY_ATTR: entry})

    def get_recent_logs(
        self,
        level: Optional[LogLevel] = None,
        limit: Optional[int] = None
    ) -> List[LogEntry]:
        """
        Recent entries, oldest first.

        Args:
            level: Only return entries of this level (optional)
            limit: Only return the newest ``limit`` entries (optional)
        """
        entries = self._recent.entries.to_list()
        if level is not None:
            entries = [entry for entry in entries if entry.level == level]
        if limit is not None:
            entries = entries[-limit:]
        return entries

    def close(self) -> None:
        """Detach and close every handler on the underlying logger."""
        for handler in self._logger.handlers[:]:
            self._logger.removeHandler(handler)
            handler.close()


class ContextLogger(_LevelMethods):
    """Wraps a StructuredLogger and merges fixed context into every entry."""

    def __init__(self, logger: StructuredLogger, context: dict):
        self._logger = logger
        self._context = context

    def with_context(self, **context: Any) -> 'ContextLogger':
        return ContextLogger(self._logger, {**self._context, **context})

    def log(
        self,
        level: LogLevel,
        message: str,
        operation: Optional[str] = None,
        duration_ms: Optional[float] = None,
        error: Optional[Union[str, Exception]] = None,
        **context: Any
    ) -> None:
        self._logger.log(
            level,
            message,
            operation=operation,
            duration_ms=duration_ms,
            error=error,
            **{**self._context, **context}
        )


def timed(operation_name: str) -> Callable[[F], F]:
    """
    Decorator logging the duration of a method call.

    The duration goes to the ``logger`` attribute of the first argument when
    it is a StructuredLogger or ContextLogger; otherwise the call is only
    passed through. Failed calls are logged too.

    Args:
        operation_name: Name of the operation for logging
    """
    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            owner_logger = getattr(args[0], 'logger', None) if args else None
            if not isinstance(owner_logger, _LevelMethods):
                return func(*args, **kwargs)

            start_ns = time.perf_counter_ns()
            try:
                return func(*args, **kwargs)
            finally:
                owner_logger.performance(operation_name, (time.perf_counter_ns() - start_ns) / 1_000_000)

        return cast(F, wrapper)
    return decorator
