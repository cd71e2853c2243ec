"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""

from ..actions import COPY_REVERT_SECONDS  # noqa: F401


class LogLevel:
    """Log level constants with numeric values for comparison.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Code block actions
COPY_LABEL = "Copy code"
COPIED_LABEL = "Copied!"
PREVIEW_LABEL = "Preview"

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages

# Chat display configuration
MESSAGE_TIMESTAMP_FORMAT = "%H:%M:%S"
STREAMING_PLACEHOLDER = "..."

WELCOME_TITLE = "What page should we build?"
WELCOME_TEXT = (
    "Describe a landing page, a component or a layout. "
    "HTML answers can be previewed in a sandboxed browser tab."
)
