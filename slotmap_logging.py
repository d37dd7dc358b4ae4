import json
import logging
import os
from logging.handlers import RotatingFileHandler

_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "asctime",
    "message",
}


def _extras(record: logging.LogRecord) -> dict:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRS
    }


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "service": record.name,
            "message": record.getMessage(),
        }
        extras = _extras(record)
        # Mandatory structured fields are always present (may be None)
        for field in ("table", "index", "generation", "error_code"):
            payload[field] = extras.get(field)
        if extras:
            payload.update(extras)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        extras = _extras(record)
        if extras:
            extra_pairs = " ".join(f"{key}={value}" for key, value in extras.items())
            msg = f"{msg} | {extra_pairs}"
        return msg


def setup_logging(service_name: str = "slotmap", settings=None) -> logging.Logger:
    """Attach stream (and optional rotating file) handlers to ``service_name``.

    Safe to call repeatedly; an already configured logger is returned as is.
    ``settings`` is a ``LoggingSettings``; read from the environment when omitted.
    """
    if settings is None:
        from slotmap.settings import load_settings

        settings = load_settings().logging

    logger = logging.getLogger(service_name)
    if logger.handlers:
        return logger

    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    if settings.format == "json":
        formatter = JsonFormatter()
    else:
        formatter = TextFormatter(fmt)

    # Stream handler (stderr)
    sh = logging.StreamHandler()
    sh.setFormatter(formatter)
    sh.setLevel(level)
    logger.addHandler(sh)

    # Rotating file handler, only when a log directory is configured
    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)
        fh_path = os.path.join(settings.log_dir, f"{service_name}.log")
        fh = RotatingFileHandler(fh_path, maxBytes=5 * 1024 * 1024, backupCount=3)
        fh.setFormatter(formatter)
        fh.setLevel(level)
        logger.addHandler(fh)

    logger.setLevel(level)
    logger.propagate = False
    return logger
