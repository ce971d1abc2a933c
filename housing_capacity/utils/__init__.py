"""Utility functions and helpers."""

from .logging_config import setup_logging
from .error_handling import (
    CapacitySystemError,
    ValidationError,
    NotFoundError,
    CapacityExceededError,
    StorageError,
    ConfigurationError,
    InternalError,
)

__all__ = [
    'setup_logging',
    'CapacitySystemError',
    'ValidationError',
    'NotFoundError',
    'CapacityExceededError',
    'StorageError',
    'ConfigurationError',
    'InternalError',
]
