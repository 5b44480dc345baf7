"""Utility modules for configuration, dates, retries and output."""

from .config import ConfigError, load_config, validate_config
from .date_range import get_previous_week_range, get_week_range_from_monday
from .retry import RateLimiter, RetryOptions, with_retry

__all__ = [
    "ConfigError",
    "load_config",
    "validate_config",
    "get_previous_week_range",
    "get_week_range_from_monday",
    "RateLimiter",
    "RetryOptions",
    "with_retry",
]
