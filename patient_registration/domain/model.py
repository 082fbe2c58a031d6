"""
Registration data model - Records and their lifecycle states.

Records are immutable values. State transitions return a new record,
which the coordinator then writes back through the record store.
"""

from dataclasses import dataclass, field, replace
from enum import Enum


class RegistrationStatus(str, Enum):
    """
    Registration lifecycle states.

    State Transitions (forward-only):
    - PENDING -> REGISTERED (correct pincode)
    - PENDING -> BLOCKED (attempt limit reached)

    Terminal States:
    - REGISTERED: Registration confirmed, pincode cleared
    - BLOCKED: Too many incorrect pincodes, never re-evaluated
    """

    PENDING = "PENDING"
    REGISTERED = "REGISTERED"
    BLOCKED = "BLOCKED"


@dataclass(frozen=True)
class PostalAddress:
    """Postal address of the applicant."""

    postal_code: str = ""
    house_number: int = 0


@dataclass(frozen=True)
class PersonalData:
    """Identifying fields captured verbatim from the initiate request."""

    full_name: str
    national_id: str
    email: str
    address: PostalAddress = field(default_factory=PostalAddress)


@dataclass(frozen=True)
class RegistrationRecord:
    """
    Persisted state of one registration attempt.

    pincode is None once the registration is confirmed.
    version is owned by the record store and bumped on every
    successful compare-and-swap.
    """

    id: str
    personal_data: PersonalData
    pincode: int | None
    status: RegistrationStatus = RegistrationStatus.PENDING
    failed_attempts: int = 0
    version: int = 0

    def with_failed_attempt(self, max_attempts: int) -> "RegistrationRecord":
        """Count one rejected pincode, blocking the record at the attempt limit."""
        failed_attempts = self.failed_attempts + 1
        status = self.status
        if failed_attempts >= max_attempts:
            status = RegistrationStatus.BLOCKED
        return replace(self, failed_attempts=failed_attempts, status=status)

    def confirmed(self) -> "RegistrationRecord":
        """Mark the registration as complete and clear the pincode."""
        return replace(self, status=RegistrationStatus.REGISTERED, pincode=None)
