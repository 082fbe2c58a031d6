"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Each exception carries an ErrorKind so that a transport adapter can
tell the caller precisely which failure occurred.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of failure surfaced at the coordinator boundary."""

    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    BLOCKED = "BLOCKED"
    INVALID_PINCODE = "INVALID_PINCODE"
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"
    INTERNAL = "INTERNAL"


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    kind: ErrorKind = ErrorKind.INTERNAL


class InvalidInput(RegistrationError):
    """Request is missing a mandatory field or carries an unusable value."""

    kind = ErrorKind.INVALID_INPUT


class RecordNotFound(RegistrationError):
    """No pending registration exists for the given id."""

    kind = ErrorKind.NOT_FOUND


class RegistrationBlocked(RegistrationError):
    """Record reached the attempt limit and can no longer be completed."""

    kind = ErrorKind.BLOCKED


class InvalidPincode(RegistrationError):
    """Submitted pincode does not match the pending registration."""

    kind = ErrorKind.INVALID_PINCODE

    def __init__(self, record_id: str, failed_attempts: int, blocked: bool) -> None:
        super().__init__(f"Invalid pincode for {record_id} (attempt {failed_attempts})")
        self.record_id = record_id
        self.failed_attempts = failed_attempts
        self.blocked = blocked


class NotificationFailed(RegistrationError):
    """Pincode could not be delivered to the applicant."""

    kind = ErrorKind.NOTIFICATION_FAILED


class InternalError(RegistrationError):
    """A collaborator (record store) failed."""

    kind = ErrorKind.INTERNAL


class StoreError(Exception):
    """Raised by record store adapters when the storage engine fails."""

    pass
