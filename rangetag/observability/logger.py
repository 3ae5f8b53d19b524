"""
Structured logging for rangetag

Every library logger is a child of "rangetag" and propagates to the one
handler installed by configure_logging(). Records go to stderr as JSON
(python-json-logger) or plain text; stdout stays free for verdict output.
"""
import logging
import os
import sys
import time

from pythonjsonlogger import jsonlogger

ROOT_LOGGER_NAME = "rangetag"

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s - %(message)s"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with timestamp, upper-case level, logger, module and function keys."""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        # Fields named in the format string arrive pre-filled with None
        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = (log_record.get("level") or record.levelname).upper()
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName


class StderrHandler(logging.StreamHandler):
    """
    StreamHandler that always writes to the current sys.stderr.

    sys.stderr is looked up at emit time, so a replaced stderr (pytest
    capture, contextlib.redirect_stderr) is honoured. The stream cannot be
    swapped: setStream() raises.
    """

    def __init__(self):
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        # StreamHandler.__init__ assigns the stream; it is always sys.stderr
        pass

    def setStream(self, stream):
        raise ValueError("StderrHandler always writes to sys.stderr")


def _formatter(format_type: str) -> logging.Formatter:
    if format_type == "json":
        return CustomJsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    # Text format for local development
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


_configured = False


def configure_logging(level: str | None = None, format_type: str | None = None) -> logging.Logger:
    """
    (Re)configure the "rangetag" logger.

    Args:
        level: Log level name; defaults to LOG_LEVEL, then WARNING
        format_type: "json" or "text"; defaults to LOG_FORMAT, then json

    Returns:
        The configured library logger
    """
    global _configured
    log_level_str = level or os.getenv("LOG_LEVEL", "WARNING")
    log_level = LOG_LEVELS.get(log_level_str.upper(), logging.WARNING)
    format_type = format_type or os.getenv("LOG_FORMAT", "json")

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = StderrHandler()
    handler.setLevel(log_level)
    handler.setFormatter(_formatter(format_type))
    logger.addHandler(handler)
    logger.propagate = False

    _configured = True
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger under the "rangetag" namespace

    Names outside the namespace are prefixed ("core.rules" becomes
    "rangetag.core.rules"). The library logger is configured from the
    environment on first use.
    """
    if not _configured:
        configure_logging()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


class log_operation:
    """
    Context manager logging the start, end and duration of an operation

    Usage:
        with log_operation("Validating records", logger=logger, record_type="Param"):
            ...
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.start_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.info(
            f"Starting: {self.operation_name}",
            extra={"operation": self.operation_name, **self.extra_fields}
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        extra = {
            "operation": self.operation_name,
            "duration_seconds": round(time.perf_counter() - self.start_time, 3),
            **self.extra_fields,
        }
        if exc_type is None:
            self.logger.info(f"Completed: {self.operation_name}", extra={**extra, "status": "success"})
        else:
            self.logger.error(
                f"Failed: {self.operation_name}",
                extra={
                    **extra,
                    "status": "error",
                    "error_type": exc_type.__name__,
                    "error_message": str(exc_val),
                },
            )
        return False  # Don't suppress exceptions
