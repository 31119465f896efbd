"""Logging setup and run logger."""

from .logger import RunLogger, setup_logger

__all__ = ["RunLogger", "setup_logger"]
