"""Error taxonomy shared by the core, storage and API layers."""

from typing import Optional


class LeadSplitError(Exception):
    """Base class for every error the service reports to a caller."""

    code = "server_error"
    status_code = 500

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def to_dict(self) -> dict:
        payload = {"success": False, "error": self.code, "detail": self.message}
        if self.stage:
            payload["stage"] = self.stage
        return payload


class ValidationError(LeadSplitError):
    """Missing fields, malformed rows, unsupported or oversize files."""

    code = "validation_error"
    status_code = 400


class PreconditionError(LeadSplitError):
    """Not enough agents, or an upload with no records."""

    code = "precondition_failed"
    status_code = 400


class NotFoundError(LeadSplitError):
    code = "not_found"
    status_code = 404


class ConflictError(LeadSplitError):
    """Duplicate agent email."""

    code = "conflict"
    status_code = 400


class StorageError(LeadSplitError):
    code = "storage_error"
    status_code = 500


class AuthError(LeadSplitError):
    """Missing or wrong shared secret."""

    code = "auth_error"
    status_code = 401
