"""
Custom exception classes
"""
from fastapi import HTTPException


class InvalidPayloadError(HTTPException):
    """Raised when a request body is missing required fields"""
    def __init__(self, reason: str = "Invalid payload"):
        super().__init__(
            status_code=400,
            detail=reason
        )


class TemplateNotFoundError(HTTPException):
    """Raised when a template file is missing, unreadable or not valid JSON"""
    def __init__(self, template_id: str, reason: str = ""):
        super().__init__(
            status_code=404,
            detail=f"Template {template_id} not found" + (f": {reason}" if reason else "")
        )


class SessionNotFoundError(HTTPException):
    """Raised when a session file is missing, unreadable or not valid JSON"""
    def __init__(self, file: str, reason: str = ""):
        super().__init__(
            status_code=404,
            detail=f"Session {file} not found" + (f": {reason}" if reason else "")
        )


class StorageError(HTTPException):
    """Raised when writing or deleting a stored document fails"""
    def __init__(self, reason: str = "Unknown error"):
        super().__init__(
            status_code=500,
            detail=f"Storage failed: {reason}"
        )


class AIServiceError(HTTPException):
    """Raised when the hosted model call fails"""
    def __init__(self, reason: str = "AI service unavailable"):
        super().__init__(
            status_code=500,
            detail=f"AI service error: {reason}"
        )
