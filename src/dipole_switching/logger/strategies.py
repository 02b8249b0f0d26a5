"""
Storage strategies for the simulation logger.

A strategy receives fully-resolved log entries (message, priority name,
timestamp) and decides where they go. The engine never talks to a strategy
directly; it calls Logger.log.
"""

import os
from datetime import datetime
from typing import List, Tuple


class LogStorageStrategy:
    """
    Interface for log destinations.
    """

    def store_log(self, message, priority, timestamp):
        """
        Persist one entry.

        Parameters:
        message (str): Log text.
        priority (str): Priority name, e.g. "INFO".
        timestamp (str): Formatted wall-clock time of the entry.
        """
        raise NotImplementedError()

    def flush_logs(self):
        """Discard everything stored so far."""
        raise NotImplementedError()


class LocalFileStrategy(LogStorageStrategy):
    """
    Writes entries as "[timestamp] [PRIORITY] message" lines to a file.

    By default the file is truncated when the strategy is created, so each
    process starts with a fresh log; pass append=True to keep history
    across runs.
    """

    def __init__(self, file_location, append=False):
        self.file_location = self.resolve_file_path(file_location)
        if append and os.path.exists(self.file_location):
            self._write_banner("LOG REOPENED", mode='a')
        else:
            self._write_banner("LOG INITIALIZATION", mode='w')

    @staticmethod
    def resolve_file_path(file_location):
        """Absolute path for file_location, creating parent directories."""
        path = os.path.abspath(os.fspath(file_location))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        return path

    def _write_banner(self, label, mode):
        with open(self.file_location, mode) as log_file:
            log_file.write(f"{label}: {datetime.now()}\n")

    def store_log(self, message, priority, timestamp):
        with open(self.file_location, 'a') as log_file:
            log_file.write(f"[{timestamp}] [{priority}] {message}\n")

    def flush_logs(self):
        self._write_banner("LOG FLUSHED", mode='w')


class InMemoryStrategy(LogStorageStrategy):
    """
    Keeps entries in a list; used by tests and by callers that want to
    inspect a run's log without touching disk.
    """

    def __init__(self):
        self.entries: List[Tuple[str, str, str]] = []

    def store_log(self, message, priority, timestamp):
        self.entries.append((timestamp, priority, message))

    def flush_logs(self):
        self.entries.clear()

    def messages(self, priority=None) -> List[str]:
        """Stored messages, optionally only those with the given priority name."""
        return [m for _, p, m in self.entries if priority is None or p == priority]
