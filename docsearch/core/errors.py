"""Service error taxonomy shared by every client and the task admission flow."""

from __future__ import annotations


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str, data: dict[str, object] | None = None):
        super().__init__(message)
        self.message = message
        self.data = data or {}

    def to_dict(self) -> dict[str, object]:
        return {"code": self.status_code, "message": self.message, "data": self.data}


class ValidationError(ServiceError):
    """Input rejected before any network call."""

    status_code = 400


class ConfigurationError(ServiceError):
    """A required origin or credential is not configured."""

    status_code = 500


class RequestFailure(ServiceError):
    """Transport failure or non-success response from an upstream service."""

    status_code = 400


class ParseFailure(RequestFailure):
    """Upstream answered, but the body did not match the expected shape.

    The caller only sees a generic message; the upstream detail goes to the log.
    """
