"""
Request helpers shared by the API route modules.
"""

from flask import abort, request

from utils.messages import get_message
from utils.validators import validate_optional_int, sanitize_input

DEFAULT_ACTOR = 'admin'


def get_actor(data: dict = None) -> str:
    """
    Name of the admin performing the action.

    Taken from the 'admin' field of the body, then the X-Admin-User header.
    A non-string 'admin' aborts the request with 400.
    """
    actor = (data or {}).get('admin') or request.headers.get('X-Admin-User')
    if actor is not None and not isinstance(actor, str):
        abort(400, description=get_message('invalid_text', field='admin'))
    return sanitize_input(actor, 50) or DEFAULT_ACTOR


def get_expected_version(data: dict) -> tuple:
    """
    Read the optional expected_version field.

    Returns:
        Tuple of (is_valid, version_or_None, error_message)
    """
    return validate_optional_int(data.get('expected_version'), 'expected_version')


def get_list_arg(name: str) -> list:
    """Read a list query parameter given as ?x=a&x=b or ?x=a,b."""
    values = []
    for raw in request.args.getlist(name):
        values.extend(part.strip() for part in raw.split(',') if part.strip())
    return values


def get_json_body() -> dict:
    """JSON object body, or an empty dict for bodiless or non-object payloads."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
