"""
Custom validators
"""
from typing import Any

from app.utils.exceptions import InvalidPayloadError


def validate_session_payload(body: Any) -> dict:
    """
    A session save needs a JSON object whose `messages` is a list.
    Everything else in the body is stored as sent.
    """
    if not isinstance(body, dict) or not isinstance(body.get("messages"), list):
        raise InvalidPayloadError("Invalid payload: messages must be an array")
    return body


def validate_template_payload(body: Any) -> dict:
    """Templates are stored as JSON objects only"""
    if not isinstance(body, dict):
        raise InvalidPayloadError("Invalid payload: template must be a JSON object")
    return body


def require_filename(file: Any) -> str:
    value = str(file).strip() if file is not None else ""
    if not value:
        raise InvalidPayloadError("missing file")
    return value
