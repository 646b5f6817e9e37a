"""Retry logic with exponential backoff for Confluence API rate limits.

Only 429 responses are retried. The wait follows the 1s, 2s, 4s backoff
unless the server sends a numeric Retry-After header, which takes
precedence (capped at MAX_RETRY_AFTER seconds).
"""

import logging
import time
from typing import Callable, Optional, TypeVar

from .errors import APIAccessError

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3
MAX_RETRY_AFTER = 60.0

RATE_LIMIT_PATTERNS = (
    '429',
    'too many requests',
    'rate limit exceeded',
    'rate limited',
)


def retry_on_rate_limit(func: Callable[..., T], *args, **kwargs) -> T:
    """Call ``func`` and retry it while Confluence answers with 429.

    Args:
        func: The function to execute with retry logic
        *args: Positional arguments to pass to the function
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the function

    Raises:
        APIAccessError: If the rate limit persists after 3 retries
        Other exceptions: Passed through immediately without retry
    """
    for attempt in range(MAX_RETRIES + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not is_rate_limit_error(e):
                raise

            if attempt >= MAX_RETRIES:
                logger.error(
                    f"Rate limit persisted after {MAX_RETRIES} retries, giving up"
                )
                raise APIAccessError(
                    f"Confluence API failure (after {MAX_RETRIES} retries)"
                ) from e

            wait_time = _retry_after(e)
            if wait_time is None:
                wait_time = float(2 ** attempt)
            logger.info(
                f"Rate limit hit, retrying in {wait_time:g}s "
                f"(retry {attempt + 1}/{MAX_RETRIES})"
            )
            time.sleep(wait_time)

    raise APIAccessError(f"Confluence API failure (after {MAX_RETRIES} retries)")


def is_rate_limit_error(exception: Exception) -> bool:
    """Check if an exception represents a rate limit (429) error.

    Args:
        exception: The exception to check

    Returns:
        True if this appears to be a rate limit error, False otherwise
    """
    if getattr(exception, 'status_code', None) == 429:
        return True

    response = getattr(exception, 'response', None)
    if response is not None and getattr(response, 'status_code', None) == 429:
        return True

    error_msg = str(exception).lower()
    return any(pattern in error_msg for pattern in RATE_LIMIT_PATTERNS)


def _retry_after(exception: Exception) -> Optional[float]:
    """Read a numeric Retry-After header from the failed response, if any."""
    response = getattr(exception, 'response', None)
    headers = getattr(response, 'headers', None)
    if not isinstance(headers, dict) and not hasattr(headers, 'get'):
        return None

    value = headers.get('Retry-After')
    if value is None:
        return None

    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None

    if seconds < 0:
        return None
    return min(seconds, MAX_RETRY_AFTER)
