import logging
import sys

from appforge.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

# Attributes every LogRecord has; anything else came in through extra=.
_RESERVED = set(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class ExtraFormatter(logging.Formatter):
    """Appends ``extra=`` fields as key=value pairs after the event name."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {k: v for k, v in record.__dict__.items() if k not in _RESERVED}
        if not extras:
            return base
        return base + " " + " ".join(f"{k}={v!r}" for k, v in sorted(extras.items()))


def _build_logger() -> logging.Logger:
    log = logging.getLogger("appforge")
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ExtraFormatter(LOG_FORMAT))
        log.addHandler(handler)
    log.setLevel(get_settings().log_level.upper())
    return log


logger = _build_logger()
