"""Error taxonomy for configuration, connection, validation and storage failures."""

from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """Machine-readable error codes."""

    CONFIG_MISSING = "CONFIG_MISSING"
    CONNECTION_FAILED = "CONNECTION_FAILED"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_DATE = "INVALID_DATE"
    INVALID_TIME = "INVALID_TIME"
    INVALID_LIST_FIELD = "INVALID_LIST_FIELD"
    INVALID_REFERENCE_FORMAT = "INVALID_REFERENCE_FORMAT"
    INVALID_EMAIL = "INVALID_EMAIL"
    DANGLING_REFERENCE = "DANGLING_REFERENCE"
    DUPLICATE_SLUG = "DUPLICATE_SLUG"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"


class DevEventError(Exception):
    """Base error with code and user-safe message."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ConfigError(DevEventError):
    """Required configuration is missing. Fatal; not retried."""

    def __init__(self, setting: str) -> None:
        super().__init__(
            code=ErrorCode.CONFIG_MISSING,
            message=f"Please define the {setting} environment variable (or set it in .env)",
        )
        self.setting = setting


class DatabaseConnectionError(DevEventError):
    """The database could not be reached. The next attempt starts from scratch."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            code=ErrorCode.CONNECTION_FAILED,
            message=f"Could not connect to the database: {reason}",
        )


class ValidationError(DevEventError):
    """Malformed input. The caller must supply corrected values."""

    def __init__(self, code: ErrorCode, field: Optional[str], message: str) -> None:
        super().__init__(code=code, message=message)
        self.field = field


class MissingFieldError(ValidationError):
    def __init__(self, field: str) -> None:
        super().__init__(
            code=ErrorCode.MISSING_FIELD,
            field=field,
            message=f"{field} is required and cannot be empty",
        )


class InvalidDateError(ValidationError):
    def __init__(self, value: Any = None) -> None:
        super().__init__(
            code=ErrorCode.INVALID_DATE,
            field="date",
            message="Invalid date format; expected a parsable date string",
        )
        self.value = value


class InvalidTimeError(ValidationError):
    def __init__(self, value: Any = None) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TIME,
            field="time",
            message="Invalid time format; expected HH:MM or HH:MM AM/PM",
        )
        self.value = value


class InvalidListFieldError(ValidationError):
    def __init__(self, field: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_LIST_FIELD,
            field=field,
            message=f"{field} must contain at least one non-empty item",
        )


class InvalidReferenceFormatError(ValidationError):
    def __init__(self, field: str = "event_id") -> None:
        super().__init__(
            code=ErrorCode.INVALID_REFERENCE_FORMAT,
            field=field,
            message=f"Invalid {field} format",
        )


class InvalidEmailError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EMAIL,
            field="email",
            message="Invalid email address",
        )


class DanglingReferenceError(ValidationError):
    def __init__(self, event_id: int) -> None:
        super().__init__(
            code=ErrorCode.DANGLING_REFERENCE,
            field="event_id",
            message="Referenced event does not exist",
        )
        self.event_id = event_id


class DuplicateSlugError(DevEventError):
    """Another event already owns this slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_SLUG,
            message=f"An event with slug '{slug}' already exists",
        )
        self.slug = slug


class EventNotFoundError(DevEventError):
    def __init__(self, event_id: int) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message=f"Event {event_id} not found",
        )
        self.event_id = event_id
