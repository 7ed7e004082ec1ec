"""Structured logging setup."""
import logging, sys, json
from typing import Optional

# LogRecord attributes that are not user-supplied ``extra`` fields
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

DEFAULT_PATTERN = "%(asctime)s %(levelname)s %(name)s %(message)s"


class JsonFormatter(logging.Formatter):
    def format(self, record):
        base = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        for k, v in record.__dict__.items():
            if k.startswith("_") or k in _RESERVED:
                continue
            base[k] = v
        return json.dumps(base, default=str)


def build_handler(
    style: str = "json",
    pattern: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Handler:
    """Create the stdout (or file) handler for ``style`` "json" or "text"."""
    handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler(sys.stdout)
    if style == "json":
        handler.setFormatter(JsonFormatter())
    elif style == "text":
        handler.setFormatter(logging.Formatter(pattern or DEFAULT_PATTERN))
    else:
        raise ValueError(f"Unknown log style {style!r}; expected 'json' or 'text'")
    return handler


def configure_logging(
    level: str = "INFO",
    style: str = "json",
    pattern: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(level)
    root.addHandler(build_handler(style, pattern, log_file))
