"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from blobwriter.common.constants import TRANSFER_LOG_FILE


class ServerLogger:
    """Server logging class."""

    def __init__(self, log_level: int = logging.INFO):
        # Set up main logger
        self.logger = logging.getLogger('blobwriter.server')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)

        # Add handler to logger
        self.logger.addHandler(console_handler)
        self.logger.propagate = False

        # Transfer log is off until a directory is configured
        self.transfer_log_path: Optional[Path] = None

    def set_level(self, log_level: int):
        """Change the level of the logger and its handlers."""
        self.logger.setLevel(log_level)
        for handler in self.logger.handlers:
            handler.setLevel(log_level)

    def set_log_dir(self, log_dir: Optional[str]):
        """Enable (or disable, with None) the per-transfer log file."""
        if not log_dir:
            self.transfer_log_path = None
            return
        logs_dir = Path(log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)
        self.transfer_log_path = logs_dir / TRANSFER_LOG_FILE

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_session_started(self, host: str, port: int):
        """Log server session start."""
        self.info(f"Blob server listening on {host}:{port}")

    def log_rejected(self, remote: str, status: int, reason: str):
        """Log a request rejected before any filesystem access."""
        self.warning(f"Rejected PUT from {remote}: {status} {reason}")

    def log_transfer_start(self, destination: str, size: int, recursive: bool):
        """Log streaming transfer start."""
        self.info(f"Streaming write started: {destination} ({size} bytes, recursive={recursive})")

    def log_progress(self, destination: str, received: int, size: int):
        """Log streaming progress."""
        progress = (received / size) * 100 if size else 100.0
        self.debug(f"Write progress [{destination}]: {received}/{size} bytes ({progress:.1f}%)")

    def log_publish(self, destination: str, size: int):
        """Log a published file."""
        self.info(f"Published {destination} ({size} bytes)")
        self._write_to_file(f"{datetime.now().isoformat()} | PUBLISH | {destination} | SIZE: {size} bytes")

    def log_transfer_failed(self, destination: str, received: int, size: int, reason: str):
        """Log a failed streaming transfer."""
        self.error(f"Streaming write to {destination} failed after {received}/{size} bytes: {reason}")
        self._write_to_file(f"{datetime.now().isoformat()} | FAILED | {destination} | RECEIVED: {received}/{size} bytes | {reason}")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")

    def _write_to_file(self, content: str):
        """Write content to the transfer log file."""
        if self.transfer_log_path is None:
            return
        try:
            with open(self.transfer_log_path, 'a', encoding='utf-8') as f:
                f.write(content + '\n')
        except OSError as e:
            self.error(f"Failed to write to log file {self.transfer_log_path}: {e}")


# Global logger instance
logger = ServerLogger()
