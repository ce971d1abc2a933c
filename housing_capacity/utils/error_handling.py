"""Error handling and custom exceptions for the capacity allocation system."""

import logging
from typing import Optional, Any

logger = logging.getLogger(__name__)


class CapacitySystemError(Exception):
    """Base exception class for capacity allocation errors."""
    
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Any] = None):
        self.message = message
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)
        
        # Log the error
        logger.error(f"CapacitySystemError: {message} (Code: {error_code})")


class ValidationError(CapacitySystemError):
    """Exception raised when a payload or identifier fails validation."""
    
    def __init__(self, message: str, field_name: Optional[str] = None, invalid_value: Optional[Any] = None):
        self.field_name = field_name
        self.invalid_value = invalid_value
        
        error_details = {
            'field_name': field_name,
            'invalid_value': invalid_value
        }
        
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=error_details
        )


class NotFoundError(CapacitySystemError):
    """Exception raised when an identifier does not resolve to a stored record."""
    
    def __init__(self, message: str, record_type: Optional[str] = None, record_id: Optional[str] = None):
        self.record_type = record_type
        self.record_id = record_id
        
        error_details = {
            'record_type': record_type,
            'record_id': record_id
        }
        
        super().__init__(
            message=message,
            error_code="NOT_FOUND",
            details=error_details
        )


class CapacityExceededError(CapacitySystemError):
    """Exception raised when requested residents exceed a traffic's remaining limit."""
    
    def __init__(self, message: str, traffic_id: Optional[str] = None,
                 requested: Optional[int] = None, remaining_limit: int = 0):
        self.traffic_id = traffic_id
        self.requested = requested
        self.remaining_limit = remaining_limit
        
        error_details = {
            'traffic_id': traffic_id,
            'requested': requested,
            'remaining_limit': remaining_limit
        }
        
        super().__init__(
            message=message,
            error_code="CAPACITY_EXCEEDED",
            details=error_details
        )


class StorageError(CapacitySystemError):
    """Exception raised when a record store cannot be read or written."""
    
    def __init__(self, message: str, partition: Optional[str] = None):
        self.partition = partition
        
        super().__init__(
            message=message,
            error_code="STORAGE_ERROR",
            details={'partition': partition}
        )


class ConfigurationError(CapacitySystemError):
    """Exception raised when configuration is invalid or missing."""
    
    def __init__(self, message: str, config_section: Optional[str] = None):
        self.config_section = config_section
        
        error_details = {
            'config_section': config_section
        }
        
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=error_details
        )


class InternalError(CapacitySystemError):
    """Generic failure wrapping an unexpected exception raised inside an operation."""
    
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        
        super().__init__(
            message=message,
            error_code="INTERNAL_ERROR",
            details={'cause': repr(cause) if cause is not None else None}
        )


def handle_error(error: Exception, context: str = "") -> None:
    """
    Handle and log errors with appropriate context.
    
    Args:
        error: The exception that occurred
        context: Additional context about where the error occurred
    """
    if isinstance(error, CapacitySystemError):
        logger.error(f"Capacity system error in {context}: {error.message}")
        if error.details:
            logger.error(f"Error details: {error.details}")
    else:
        logger.error(f"Unexpected error in {context}: {str(error)}", exc_info=True)


def safe_execute(func, *args, default_return=None, context: str = "", **kwargs):
    """
    Safely execute a function with error handling.
    
    Args:
        func: Function to execute
        *args: Positional arguments for the function
        default_return: Value to return if function fails
        context: Context description for error logging
        **kwargs: Keyword arguments for the function
    
    Returns:
        Function result or default_return if function fails
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        handle_error(e, context)
        return default_return
