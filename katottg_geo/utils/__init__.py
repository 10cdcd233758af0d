"""
Utility functions and helpers.
"""

from .data_utils import (
    safe_string_conversion,
    is_null_or_empty,
    first_present,
    get_data_quality_summary
)

__all__ = [
    'safe_string_conversion',
    'is_null_or_empty',
    'first_present',
    'get_data_quality_summary'
]
