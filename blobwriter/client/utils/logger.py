"""
Client logging module.

This module handles caller-side logging functionality.
"""

import logging
import sys


class ClientLogger:
    """Client logging class."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger('blobwriter.client')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        console_handler = logging.StreamHandler(sys.stderr)
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

    def set_level(self, log_level: int):
        """Change the level of the logger and its handlers."""
        self.logger.setLevel(log_level)
        for handler in self.logger.handlers:
            handler.setLevel(log_level)

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

    def log_write_start(self, path: str, size: int):
        """Log a write request."""
        self.debug(f"Writing {size} bytes to {path}")

    def log_streaming_success(self, path: str, size: int):
        """Log a write completed by the local server."""
        self.info(f"Streamed {size} bytes to {path}")

    def log_streaming_failure(self, path: str, error: Exception):
        """Log a streaming failure that triggers the fallback."""
        self.warning(f"Streaming write to {path} failed ({type(error).__name__}: {error}), falling back to chunked append")

    def log_fallback_progress(self, path: str, written: int, size: int):
        """Log fallback progress."""
        progress = (written / size) * 100 if size else 100.0
        self.debug(f"Fallback progress [{path}]: {written}/{size} bytes ({progress:.1f}%)")

    def log_fallback_success(self, path: str, size: int, chunks: int):
        """Log a write completed by the fallback."""
        self.info(f"Fallback wrote {size} bytes to {path} in {chunks} chunk(s)")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = ClientLogger()
