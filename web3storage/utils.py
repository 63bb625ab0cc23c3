"""
Formatting, validation and retry helpers.
"""

import logging
import math
import re
import time as time_module
from typing import Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")

# Coarse shape check only; does not decode multibase/multihash.
CID_PATTERN = re.compile(r"^[A-Za-z0-9]{46,59}$")


def format_file_size(size: float) -> str:
    """
    Convert a size in bytes to a human-readable string.

    Args:
        size: Size in bytes.

    Returns:
        The size in the largest fitting unit, rounded to two decimals with
        trailing zeros dropped, e.g. "1.5 KB".

    Example:
        >>> format_file_size(1536)
        '1.5 KB'
    """
    if size < 0:
        raise ValueError(f"File size cannot be negative: {size}")
    if size == 0:
        return "0 Bytes"

    # floor(log1024(size)), clamped to the unit table
    i = 0
    while i < len(SIZE_UNITS) - 1 and size >= math.pow(1024, i + 1):
        i += 1
    value = f"{size / math.pow(1024, i):.2f}".rstrip("0").rstrip(".")
    return f"{value} {SIZE_UNITS[i]}"


def is_valid_cid(cid: str) -> bool:
    """Return True if cid looks like a content identifier."""
    if not isinstance(cid, str):
        return False
    return CID_PATTERN.fullmatch(cid) is not None


def with_retry(
    fn: Callable[[], T],
    max_retries: int = 3,
    delay: float = 1.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
) -> T:
    """
    Call fn until it succeeds, backing off exponentially between attempts.

    Args:
        fn: Zero-argument callable to invoke.
        max_retries: Maximum number of attempts.
        delay: Base delay in seconds; attempt i waits delay * 2**i after failing.
        retry_on: Exception types that trigger another attempt. Anything else
            propagates immediately.

    Returns:
        The return value of the first successful call.

    Raises:
        The exception from the final attempt once all attempts have failed.
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    last_error = None
    for attempt in range(max_retries):
        try:
            return fn()
        except retry_on as e:
            last_error = e
            if attempt < max_retries - 1:
                wait = delay * math.pow(2, attempt)
                logger.warning(
                    "Attempt %d/%d failed: %s; retrying in %.2fs",
                    attempt + 1, max_retries, e, wait,
                )
                time_module.sleep(wait)

    raise last_error
