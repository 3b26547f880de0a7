"""
Transaction safety helpers shared by the sales and order services.

This module provides:
1. State machine validation for status transitions
2. Retry logic for operations that failed on a system-generated value
"""

from functools import wraps
import logging
import time
from typing import Callable, Dict, List

from core.exceptions import InvalidStatusTransition

logger = logging.getLogger(__name__)


# ==============================================================================
# STATE MACHINE FOR STATUS TRANSITIONS
# ==============================================================================

# Valid status transitions for Order
ORDER_STATUS_TRANSITIONS = {
    'new': ['confirmed', 'cancelled'],
    'confirmed': ['processing', 'cancelled'],
    'processing': ['delivered', 'cancelled'],
    'delivered': [],  # Terminal state
    'cancelled': [],  # Terminal state
}


def validate_status_transition(current_status: str, new_status: str,
                               transitions: Dict[str, List[str]],
                               resource_type: str = 'resource') -> bool:
    """
    Validate that a status transition is allowed.

    Args:
        current_status: Current status of the resource
        new_status: Proposed new status
        transitions: Dict mapping status to list of valid next statuses
        resource_type: Name of resource for error messages

    Returns:
        True if transition is valid

    Raises:
        InvalidStatusTransition if transition is invalid
    """
    if current_status == new_status:
        return True  # No change is always valid

    valid_transitions = transitions.get(current_status, [])

    if new_status not in valid_transitions:
        raise InvalidStatusTransition(
            f"Invalid {resource_type} status transition: {current_status} -> {new_status}",
            details={
                'current_status': current_status,
                'requested_status': new_status,
                'allowed': valid_transitions,
            }
        )

    return True


# ==============================================================================
# RETRY WITH EXPONENTIAL BACKOFF
# ==============================================================================

class RetryableError(Exception):
    """Exception that indicates an operation can be safely retried."""
    pass


def retry_on_failure(
    max_retries: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    retryable_exceptions: tuple = (RetryableError,),
):
    """
    Decorator to retry an operation with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Initial delay between retries (seconds), 0 retries immediately
        max_delay: Maximum delay between retries (seconds)
        retryable_exceptions: Tuple of exceptions that trigger retry
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    if attempt >= max_retries:
                        logger.error(f"All retries failed for {func.__name__}: {str(e)}")
                        raise
                    delay = min(base_delay * (2 ** attempt), max_delay)
                    logger.warning(
                        f"Retry {attempt + 1}/{max_retries} for {func.__name__} "
                        f"after {delay:.2f}s: {str(e)}"
                    )
                    if delay:
                        time.sleep(delay)

        return wrapper
    return decorator
