import threading
from datetime import datetime
from enum import Enum
import os
from .strategies import LocalFileStrategy

DEFAULT_LOG_PATH = "/tmp/dipole_switching_logs.txt"
LOG_PATH_ENV = "DIPOLE_SWITCHING_LOG_PATH"
LOG_LEVEL_ENV = "DIPOLE_SWITCHING_LOG_LEVEL"


class Logger:
    """
    Process-wide simulation logger.

    Static class: engine components call ``Logger.log`` and the destination
    is chosen once by installing a storage strategy. Entries below
    ``min_priority`` are dropped before they reach the strategy, which keeps
    per-tick DEBUG chatter out of long runs unless asked for.
    """

    class LogPriority(Enum):
        DEBUG = 1
        INFO = 2
        WARNING = 3
        ERROR = 4
        CRITICAL = 5

    is_logging_enabled = True
    log_storage_strategy = None
    min_priority = LogPriority.DEBUG
    _lock = threading.RLock()

    @classmethod
    def initialize(cls):
        """
        Install the default file strategy unless one is already set.

        ``DIPOLE_SWITCHING_LOG_PATH`` overrides the file location and
        ``DIPOLE_SWITCHING_LOG_LEVEL`` (a priority name) sets the threshold.
        """
        with cls._lock:
            level = os.getenv(LOG_LEVEL_ENV)
            if level:
                cls.set_min_priority(level)
            if cls.log_storage_strategy is None:
                file_location = os.getenv(LOG_PATH_ENV, DEFAULT_LOG_PATH)
                cls.set_log_storage_strategy(LocalFileStrategy(file_location))
                cls.log(f"Logger initialized with file storage at {file_location}.",
                        cls.LogPriority.INFO)

    @classmethod
    def log(cls, message, priority=LogPriority.DEBUG):
        """
        Send one message to the active strategy.

        Parameters:
        message (str): The log message.
        priority (LogPriority): Severity; DEBUG by default.
        """
        with cls._lock:
            if not cls.is_logging_enabled or cls.log_storage_strategy is None:
                return
            if priority.value < cls.min_priority.value:
                return
            cls.log_storage_strategy.store_log(
                message, priority.name, datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            )

    @classmethod
    def set_log_storage_strategy(cls, log_storage_strategy):
        with cls._lock:
            cls.log_storage_strategy = log_storage_strategy

    @classmethod
    def set_min_priority(cls, priority):
        """
        Set the lowest priority that is stored.

        Raises:
        ValueError: If a name is given that is not a LogPriority.
        """
        if isinstance(priority, str):
            try:
                priority = cls.LogPriority[priority.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown log priority: {priority}") from None
        with cls._lock:
            cls.min_priority = priority

    @classmethod
    def flush_logs(cls):
        with cls._lock:
            if cls.log_storage_strategy is not None:
                cls.log_storage_strategy.flush_logs()

    @classmethod
    def disable_logging(cls):
        with cls._lock:
            cls.is_logging_enabled = False

    @classmethod
    def enable_logging(cls):
        with cls._lock:
            cls.is_logging_enabled = True
