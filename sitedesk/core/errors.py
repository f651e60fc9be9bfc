"""Exception types shared by services and the API error handler."""


class SiteDeskError(Exception):
    """Base class. `level` is the toast level the UI should show."""

    status_code = 400
    level = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"ok": False, "error": self.message, "level": self.level}


class ValidationError(SiteDeskError):
    """Missing field, duplicate name, empty submission. User corrects and resubmits."""


class ProtectedRecordError(SiteDeskError):
    """Attempted edit or delete of a seed/system record."""

    status_code = 409
    level = "warning"


class RecordNotFound(SiteDeskError):
    status_code = 404


class StorageQuotaError(SiteDeskError):
    """A write would exceed the workspace storage quota.

    `toasted` is set once the warning toast has been pushed, so the API
    error handler doesn't push it a second time.
    """

    status_code = 507
    level = "warning"

    def __init__(self, message: str, toasted: bool = False):
        super().__init__(message)
        self.toasted = toasted
