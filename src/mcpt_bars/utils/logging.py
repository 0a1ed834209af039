"""
Logging setup for the permutation test engine.

Console logs go to stderr so the replication report on stdout stays clean.
Run context (lookback, replication count) travels on each record as
``run_context`` and is rendered by both formatters.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, MutableMapping, Optional, Tuple

from mcpt_bars.core.config import LoggingConfig

# Third-party loggers that flood DEBUG output during plotting
_NOISY_LOGGERS = ("matplotlib", "PIL")


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


def _run_context(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "run_context", {})


class JSONFormatter(logging.Formatter):
    """One JSON object per record; run context fields are merged in at top level."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": _record_time(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": record.lineno,
        }
        log_data.update(_run_context(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """
    Single-line text format: ``time | level | logger | message [key=value ...]``.

    Level names are coloured only when use_color is set, which setup_logging
    does when stderr is a terminal.
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = False) -> None:
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:8s}"
        if self.use_color and record.levelname in self.COLORS:
            level = f"{self.COLORS[record.levelname]}{level}{self.RESET}"

        timestamp = _record_time(record).strftime("%Y-%m-%d %H:%M:%S")
        log_line = f"{timestamp} | {level} | {record.name} | {record.getMessage()}"

        context = _run_context(record)
        if context:
            log_line += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"

        if record.exc_info:
            log_line += f"\n{self.formatException(record.exc_info)}"

        return log_line


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """
    Replace the root logger's handlers according to config.

    Args:
        config: Logging configuration. If None, uses defaults.
    """
    if config is None:
        config = LoggingConfig()

    level = getattr(logging, config.level)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if config.console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        if config.format == "json":
            console_handler.setFormatter(JSONFormatter())
        else:
            console_handler.setFormatter(TextFormatter(use_color=sys.stderr.isatty()))
        root_logger.addHandler(console_handler)

    # Files are always JSON
    if config.file_output:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = config.log_dir / f"mcpt_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Module logger (call with __name__)."""
    return logging.getLogger(name)


class RunContextAdapter(logging.LoggerAdapter):
    """Attaches a fixed run context to every record, merged with any per-call context."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["run_context"] = {**self.extra, **extra.get("run_context", {})}
        kwargs["extra"] = extra
        return msg, kwargs


def get_contextual_logger(name: str, **context: Any) -> RunContextAdapter:
    """
    Logger whose records all carry the given run context.

    Example:
        >>> logger = get_contextual_logger(__name__, lookback=300, n_replications=1000)
        >>> logger.info("Replication finished")
    """
    return RunContextAdapter(get_logger(name), context)
