"""Domain error taxonomy shared by the services and the API layer."""


class ControlGapError(Exception):
    """Base class for all ControlGap domain errors."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ControlGapError):
    """Required input is missing or malformed."""

    kind = "validation_error"
    status_code = 400

    def __init__(self, fields: list[str], message: str | None = None):
        self.fields = list(fields)
        super().__init__(message or f"Missing required fields: {', '.join(self.fields)}")


class PreconditionFailed(ControlGapError):
    """An operation was requested before its prerequisite data exists."""

    kind = "precondition_failed"
    status_code = 400


class NotFound(ControlGapError):
    """A lookup by id or risk id found nothing."""

    kind = "not_found"
    status_code = 404


class StorageError(ControlGapError):
    """The underlying persistence layer failed."""

    kind = "storage_error"
    status_code = 500

    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message)


def require_fields(**values) -> None:
    """Raise ValidationError naming every argument whose value is None or empty."""
    missing = [name for name, value in values.items() if value is None or value == ""]
    if missing:
        raise ValidationError(missing)
