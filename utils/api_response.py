"""
Standardized API response helpers.

Provides consistent JSON response format across all API endpoints:

    Success:  {"success": true, "data": {...}, "message": "..."}
    Error:    {"success": false, "error": "...", "code": "scheduling_conflict"}
    Warning:  {"success": true, "data": {...}, "warning": "..."}

Usage:
    from utils.api_response import api_success, api_error, api_result

    return api_success(data={'id': 1}, message='Created')
    return api_error('Request body required', status=400)
    return api_result(approve_reservation(...))
"""

from flask import jsonify
from typing import Any

# HTTP status for each failure code returned by the reservation models
ERROR_STATUS = {
    'not_found': 404,
    'validation_error': 400,
    'invalid_transition': 409,
    'scheduling_conflict': 409,
    'concurrency_conflict': 409,
}


def api_success(
    data: dict | list | None = None,
    message: str | None = None,
    warning: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a standardized success JSON response.

    Args:
        data: Optional payload to include as 'data' key.
        message: Optional success message.
        warning: Optional warning message.
        status: HTTP status code (default 200).
        **extra_fields: Additional top-level fields to include in the response.

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if warning:
        response['warning'] = warning

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_error(error: str, status: int = 400, **extra_fields: Any) -> tuple:
    """
    Build a standardized error JSON response.

    Args:
        error: Error message.
        status: HTTP status code (default 400).
        **extra_fields: Additional top-level fields (e.g., code, conflicts).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_result(result: dict, success_status: int = 200) -> tuple:
    """
    Translate a model operation result dict into a JSON response.

    Args:
        result: Dict returned by a reservation operation
            ({'success': True, 'reservation': ...} or
             {'success': False, 'error': code, 'message': ..., ...})
        success_status: HTTP status used on success

    Returns:
        Tuple of (Response, status_code)
    """
    if result.get('success'):
        payload = {k: v for k, v in result.items() if k not in ('success', 'message')}
        return api_success(data=payload, message=result.get('message'), status=success_status)

    code = result.get('error', 'validation_error')
    extra = {k: v for k, v in result.items() if k not in ('success', 'error', 'message')}
    return api_error(
        result.get('message') or code,
        status=ERROR_STATUS.get(code, 400),
        code=code,
        **extra
    )
