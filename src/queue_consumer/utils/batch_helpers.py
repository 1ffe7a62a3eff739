"""
Module: batch_helpers.py
Description: Utility functions for batch operations.

Provides helper functions for splitting receipt lists into chunks that
fit within the queue service's per-request batch limit.

Key Components:
- chunk_list(): Split lists into smaller chunks

Dependencies: typing
Author: Queue Consumer Team
"""

from typing import List, TypeVar

T = TypeVar('T')


def chunk_list(items: List[T], chunk_size: int) -> List[List[T]]:
    """
    Split a list into smaller chunks of specified size.

    Args:
        items: List to split into chunks
        chunk_size: Maximum size of each chunk

    Returns:
        List of chunks, where each chunk is a list of items

    Raises:
        ValueError: If chunk_size is not positive

    Example:
        >>> chunk_list([1, 2, 3, 4, 5], 2)
        [[1, 2], [3, 4], [5]]
    """
    if not isinstance(items, list):
        raise ValueError("items must be a list")
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    chunks = []
    for i in range(0, len(items), chunk_size):
        chunks.append(items[i:i + chunk_size])

    return chunks
