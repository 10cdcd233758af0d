"""
Data utility functions for null handling and raw record field access.

This module provides helpers for cleaning raw KATOTTG values, picking the
first populated level field of a record and summarising raw data quality.
"""

import pandas as pd
from typing import Any, Optional, Sequence


def safe_string_conversion(value: Any) -> str:
    """
    Safely convert a value to string, handling nulls and cleaning whitespace.

    Args:
        value: Value to convert to string

    Returns:
        Cleaned string value or empty string if null
    """
    if value is None or pd.isna(value):
        return ""

    return str(value).strip()


def is_null_or_empty(value: Any) -> bool:
    """
    Check if a value is null, empty, or contains only whitespace.

    Args:
        value: Value to check

    Returns:
        True if value is null/empty, False otherwise
    """
    if value is None:
        return True

    if isinstance(value, str):
        return not value.strip()

    if isinstance(value, float) and pd.isna(value):
        return True

    return False


def first_present(record: Any, fields: Sequence[str]) -> Optional[str]:
    """
    Return the first non-empty field value of a record.

    Works for namedtuples produced by DataFrame.itertuples() as well as for
    plain objects exposing the fields as attributes.

    Args:
        record: Raw record
        fields: Field names in priority order

    Returns:
        Stripped value of the first populated field, or None
    """
    for field_name in fields:
        value = getattr(record, field_name, None)
        if not is_null_or_empty(value):
            return str(value).strip()
    return None


def get_data_quality_summary(df: pd.DataFrame) -> dict:
    """
    Generate a summary of data quality metrics for a raw records DataFrame.

    Args:
        df: DataFrame to analyze

    Returns:
        Dictionary containing data quality metrics
    """
    summary = {
        'total_records': len(df),
        'null_counts': {col: int(count) for col, count in df.isnull().sum().items()},
        'category_counts': {},
        'duplicate_count': int(df.duplicated().sum()) if not df.empty else 0,
    }

    if 'category' in df.columns:
        summary['category_counts'] = {
            str(category): int(count)
            for category, count in df['category'].value_counts(dropna=False).items()
        }

    return summary
