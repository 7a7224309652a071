import logging
import json
import os
from pathlib import Path
import threading
from flask import has_request_context, request

ROOT_LOGGER_NAME = "marketplace"


class RequestContextFilter(logging.Filter):
    """Attach the HTTP method and path of the current request, if any"""

    def filter(self, record) -> bool:
        if has_request_context():
            record.request = f"{request.method} {request.path}"
        else:
            record.request = None
        return True


class SingletonLogger:
    """
    Configures the ``marketplace`` logger tree exactly once per process.

    Module loggers are children (``marketplace.routes``, ``marketplace.domain...``)
    and propagate to the handlers installed here.
    """
    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super(SingletonLogger, cls).__new__(cls)
                    instance._configured = False
                    cls._instance = instance
        return cls._instance

    def get_logger(self, name: str = ROOT_LOGGER_NAME) -> logging.Logger:
        """
        Return the named logger, configuring the root on first use.

        Names outside the ``marketplace`` tree are nested under it.
        """
        if not self._configured:
            with self._lock:
                if not self._configured:
                    self._configure()
                    self._configured = True

        if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        return logging.getLogger(name)

    def _configure(self) -> None:
        """
        Install file and console handlers on the root of the tree.

        MARKETPLACE_LOG_TO_FILE=False keeps output on the console only
        (tests); MARKETPLACE_LOG_DIR moves the log files; LOG_LEVEL sets the
        console threshold.
        """
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(logging.DEBUG)
        root.propagate = False
        root.handlers.clear()

        formatter = JsonFormatter({
            "timestamp": "asctime",
            "level": "levelname",
            "logger": "name",
            "function": "funcName",
            "line": "lineno",
            "thread": "threadName",
            "request": "request",
            "message": "message",
        })
        context_filter = RequestContextFilter()

        handlers = []
        if os.environ.get('MARKETPLACE_LOG_TO_FILE', 'True').lower() in ('true', '1', 'yes', 'on'):
            logs_dir = Path(os.environ.get('MARKETPLACE_LOG_DIR', 'logs'))
            logs_dir.mkdir(parents=True, exist_ok=True)

            # Fixed filenames, cleared on each run
            handlers.append((logging.FileHandler(logs_dir / "marketplace.log", mode='w', encoding='utf-8'), logging.INFO))
            handlers.append((logging.FileHandler(logs_dir / "errors.log", mode='w', encoding='utf-8'), logging.ERROR))

        console_level = getattr(logging, os.environ.get('LOG_LEVEL', 'DEBUG').upper(), logging.DEBUG)
        handlers.append((logging.StreamHandler(), console_level))

        for handler, level in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            handler.addFilter(context_filter)
            root.addHandler(handler)


class JsonFormatter(logging.Formatter):
    """
    Formatter that renders each record as one JSON object.

    ``fmt_dict`` maps output keys to LogRecord attributes; attributes a record
    does not carry are rendered as null.
    """
    def __init__(self, fmt_dict: dict = None, time_format: str = "%Y-%m-%dT%H:%M:%S", msec_format: str = "%s.%03dZ"):
        super().__init__()
        self.fmt_dict = fmt_dict if fmt_dict is not None else {"message": "message"}
        self.default_time_format = time_format
        self.default_msec_format = msec_format

    def usesTime(self) -> bool:
        return "asctime" in self.fmt_dict.values()

    def format(self, record) -> str:
        record.message = record.getMessage()
        if self.usesTime():
            record.asctime = self.formatTime(record)

        payload = {key: getattr(record, attr, None) for key, attr in self.fmt_dict.items()}

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            payload["exc_info"] = record.exc_text
        if record.stack_info:
            payload["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(payload, default=str)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger in the marketplace tree.

    Args:
        name (str): Dotted logger name, e.g. ``marketplace.routes``

    Returns:
        logging.Logger: Child of the configured ``marketplace`` logger
    """
    return SingletonLogger().get_logger(name)
