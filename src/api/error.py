"""API error translation

Use cases return ``libs.result.Error`` values; routes raise ``ClientError``
and the handler registered in ``create_app`` renders them as
``{"error": {"code", "message"}}``.
"""

from typing import Optional
from fastapi import status
from libs.result import Error

STATUS_BY_CODE = {
    "AUTHORIZATION_ERROR": status.HTTP_403_FORBIDDEN,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_STATE": status.HTTP_409_CONFLICT,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


def status_for(error: Error) -> int:
    if error.code in STATUS_BY_CODE:
        return STATUS_BY_CODE[error.code]
    if error.code.endswith("_FAILED"):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


class ClientError(Exception):
    """Structured failure to return to the HTTP caller"""

    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or status_for(error)

    def to_body(self) -> dict:
        return {"error": {"code": self.error.code, "message": self.error.message}}
