"""
web3storage

A Python client for the web3.storage API.
Provides upload, status, listing, retrieval and deletion of content-addressed
files, plus gateway URL helpers.
"""

from .client import Web3Storage
from .models import (
    PIN_STATUSES,
    FileMetadata,
    PinStatus,
    UploadResult,
)
from .exceptions import (
    Web3StorageError,
    APIError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ConnectionError,
    TimeoutError,
    ValidationError,
    FileReadError,
    error_for_status,
    raise_for_status,
)
from .utils import format_file_size, is_valid_cid, with_retry

__version__ = "1.0.0"
__all__ = [
    # Main client
    "Web3Storage",
    # Models
    "PIN_STATUSES",
    "FileMetadata",
    "PinStatus",
    "UploadResult",
    # Exceptions
    "Web3StorageError",
    "APIError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "ConnectionError",
    "TimeoutError",
    "ValidationError",
    "FileReadError",
    "error_for_status",
    "raise_for_status",
    # Utilities
    "format_file_size",
    "is_valid_cid",
    "with_retry",
]
