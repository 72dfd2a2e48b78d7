"""Retry helper for synchronous HTTP calls."""

import logging
import time
from functools import wraps
from typing import Any, Callable

import requests


def should_retry_error(error: Exception) -> bool:
    """
    Determine if an error should be retried.

    Args:
        error: The exception to check

    Returns:
        True if the error should be retried, False otherwise
    """
    if isinstance(error, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)):
        return True

    status_code = getattr(error, 'status_code', None)
    if status_code:
        # Client errors are final except rate limiting and request timeout
        if 400 <= status_code < 500:
            return status_code in [408, 429]
        if 500 <= status_code < 600:
            return True

    return False


def retry_on_failure(max_retries: int = 3, delay: float = 1.0, backoff_multiplier: float = 2.0):
    """
    Decorator for retrying functions on failure with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts
        delay: Initial delay between retries in seconds
        backoff_multiplier: Multiplier for exponential backoff
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            logger = logging.getLogger(func.__module__)

            for attempt in range(max_retries + 1):
                try:
                    if attempt > 0:
                        logger.info(f"Retry attempt {attempt}/{max_retries} for {func.__name__}")
                    return func(*args, **kwargs)

                except Exception as e:
                    if not should_retry_error(e):
                        raise

                    if attempt < max_retries:
                        wait_time = delay * (backoff_multiplier ** attempt)
                        logger.warning(f"Attempt {attempt + 1} failed for {func.__name__}: {e}. Retrying in {wait_time:.1f}s...")
                        time.sleep(wait_time)
                        continue

                    logger.error(f"All {max_retries + 1} attempts failed for {func.__name__}: {e}")
                    raise
        return wrapper
    return decorator
