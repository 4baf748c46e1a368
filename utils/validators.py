"""
Input validation helper functions.
Provides validation for common input types.
"""

import re
from datetime import datetime


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_phone(phone: str) -> bool:
    """
    Validate Korean phone number format.
    Accepts: 010-1234-5678, 01012345678, 02-555-0101, +82 10 1234 5678

    Args:
        phone: Phone number to validate

    Returns:
        True if valid phone format
    """
    if not phone:
        return False

    # Remove spaces and common separators
    cleaned = re.sub(r'[\s\-\(\)]', '', phone)

    patterns = [
        r'^\+82[0-9]{8,10}$',   # +82XXXXXXXXXX
        r'^0[0-9]{8,10}$',      # 0XXXXXXXXX(X)
    ]

    return any(bool(re.match(pattern, cleaned)) for pattern in patterns)


def validate_date_format(date_str: str) -> bool:
    """
    Validate date is in YYYY-MM-DD format.

    Args:
        date_str: Date string to validate

    Returns:
        True if valid format
    """
    try:
        datetime.strptime(date_str, '%Y-%m-%d')
        return True
    except (TypeError, ValueError):
        return False


def validate_integer_list(values, field_name: str = 'ids') -> tuple:
    """
    Validate a list of positive integer IDs.

    Args:
        values: Raw value from request payload
        field_name: Name used in the error message

    Returns:
        Tuple of (is_valid, cleaned_list, error_message)
    """
    if not isinstance(values, list) or not values:
        return False, [], f'{field_name} must be a non-empty list'

    cleaned = []
    for value in values:
        if isinstance(value, bool):
            return False, [], f'{field_name} must contain integers'
        try:
            number = int(value)
        except (TypeError, ValueError):
            return False, [], f'{field_name} must contain integers'
        if number <= 0:
            return False, [], f'{field_name} must contain positive integers'
        if number not in cleaned:
            cleaned.append(number)

    return True, cleaned, ''


def validate_optional_int(value, field_name: str) -> tuple:
    """
    Validate an optional non-negative integer (e.g. expected_version).

    Returns:
        Tuple of (is_valid, value_or_None, error_message)
    """
    if value in (None, ''):
        return True, None, ''
    if isinstance(value, bool):
        return False, None, f'{field_name} must be an integer'
    try:
        number = int(value)
    except (TypeError, ValueError):
        return False, None, f'{field_name} must be an integer'
    if number < 0:
        return False, None, f'{field_name} cannot be negative'
    return True, number, ''


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    # Strip whitespace
    sanitized = text.strip()

    # Limit length if specified
    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized
