"""Structured logging for pytopic."""

import json
import time

from .config import LOG_LEVELS


class Logger:
    """JSON-structured logger with a minimum level."""

    def __init__(self, component: str = "index", level: str = "WARN"):
        self.component = component
        level = str(level).upper()
        self.level = level if level in LOG_LEVELS else "WARN"

    def enabled_for(self, level: str) -> bool:
        return LOG_LEVELS.index(level) >= LOG_LEVELS.index(self.level)

    def _log(self, level: str, message: str, **kwargs):
        """Internal logging method."""
        if not self.enabled_for(level):
            return
        log_entry = {
            "timestamp": time.time(),
            "level": level,
            "component": self.component,
            "message": message,
            **kwargs
        }
        print(json.dumps(log_entry, default=str))

    def info(self, message: str, **kwargs):
        """Log info level message."""
        self._log("INFO", message, **kwargs)

    def warn(self, message: str, **kwargs):
        """Log warning level message."""
        self._log("WARN", message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log error level message."""
        self._log("ERROR", message, **kwargs)

    def debug(self, message: str, **kwargs):
        """Log debug level message."""
        self._log("DEBUG", message, **kwargs)
