"""Error types raised by the persistence and route layers.

Routes and the gateway raise these; ``main.py`` turns them into HTTP
responses in one place, so handlers never build error bodies themselves.
"""
from typing import Any, Dict, List, Optional

from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Something went wrong!"

    def __init__(self, message: Optional[str] = None, error: Any = None):
        self.message = message or self.message
        self.error = error
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation failed"

    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__(self.message)
        self.errors = errors

    def to_body(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class PersistenceError(AppError):
    message = "Database error"


def format_violations(raw_errors) -> List[Dict[str, Any]]:
    """Flatten pydantic/FastAPI error dicts into ``{location, path, msg, type}``."""
    violations = []
    for err in raw_errors:
        loc = list(err.get("loc", ()))
        location = str(loc[0]) if loc else "body"
        path = ".".join(str(part) for part in loc[1:]) or location
        violations.append({
            "location": location,
            "path": path,
            "msg": err.get("msg", "Invalid value"),
            "type": err.get("type", "value_error"),
        })
    return violations


class RequestTimeoutError(AppError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    message = "Request timed out"
