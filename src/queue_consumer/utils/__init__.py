"""
Module: utils
Description: Package initialization for utility functions.

Current utilities:
- logger: Structured logging configuration and helpers
- batch_helpers: Splitting receipt lists into transport-sized chunks
"""

__all__ = []
