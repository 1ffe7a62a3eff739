"""
Package: config
Description: Environment-driven configuration for the queue consumer.
"""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
