"""
Miscellaneous utility helper functions.
Provides common functionality used across the application.
"""

import asyncio
import uuid


def generate_id() -> str:
    """
    Generate a record ID for locations, rooms and bookings.

    Returns:
        32-character hex string
    """
    return uuid.uuid4().hex


def chunked(items: list, size: int) -> list:
    """
    Split a list into consecutive chunks.
    Used to keep "id IN (...)" queries under the store's batch limit.

    Args:
        items: Items to split
        size: Maximum chunk size (must be positive)

    Returns:
        list of lists
    """
    if size < 1:
        raise ValueError('Chunk size must be positive')
    items = list(items)
    return [items[i:i + size] for i in range(0, len(items), size)]


def run_async(coro):
    """
    Run a coroutine to completion from synchronous code (routes, CLI commands).

    Args:
        coro: Coroutine object

    Returns:
        The coroutine's result
    """
    return asyncio.run(coro)
