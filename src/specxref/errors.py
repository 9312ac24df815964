from __future__ import annotations

from datetime import datetime
from enum import StrEnum


class ErrorCode(StrEnum):
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    FETCH_FAILED = "FETCH_FAILED"
    PARSE_ERROR = "PARSE_ERROR"
    CONFIG_INVALID = "CONFIG_INVALID"


class XrefError(Exception):
    """Raised for every expected failure while talking to GitHub or parsing its data.

    The GitHub client raises it; resolvers catch it at their public boundary
    and return ``None`` so a single bad reference never stops the run.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        recoverable: bool = False,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable
        self.status_code = status_code

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "status_code": self.status_code,
                "recoverable": self.recoverable,
            }
        }


class RateLimitError(XrefError):
    """GitHub reported an exhausted quota (HTTP 403 with zero remaining requests)."""

    def __init__(self, message: str, reset_at: datetime | None = None) -> None:
        super().__init__(
            code=ErrorCode.RATE_LIMITED,
            message=message,
            recoverable=True,
            status_code=403,
        )
        self.reset_at = reset_at

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["error"]["reset_at"] = self.reset_at.isoformat() if self.reset_at else None
        return payload
