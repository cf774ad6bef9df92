"""Shared utilities for Ladrillos."""

from ladrillos.utils.logger import get_logger

__all__ = ["get_logger"]
