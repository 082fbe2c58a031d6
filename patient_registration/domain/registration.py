"""
Registration domain service - Patient registration state machine.

This module contains the core business logic for two-phase patient
registration: the applicant submits personal data and receives a pincode
by email, then submits the pincode to confirm the registration.

Registration State Machine (Forward-Only Transitions)
=====================================================

States:
- PENDING: Initial state after a successful initiate call
- REGISTERED: Terminal state after the correct pincode was submitted
- BLOCKED: Terminal state after max_attempts incorrect pincodes

Valid Transitions:
    PENDING -> PENDING     (incorrect pincode, attempts + 1 < max)
    PENDING -> BLOCKED     (incorrect pincode, attempts + 1 >= max)
    PENDING -> REGISTERED  (correct pincode, pincode cleared)

Invalid Transitions (never allowed):
    REGISTERED -> any      (reported as RecordNotFound)
    BLOCKED -> any         (reported as RegistrationBlocked)

The read-modify-write of the completion phase is made atomic per record
through RecordStore.compare_and_swap(). A lost race re-reads the record
and re-evaluates it, so concurrent submissions are never under-counted.
No lock is held across calls, so different records never contend.
"""

import logging
import secrets
from dataclasses import dataclass

from .exceptions import (
    InternalError,
    InvalidInput,
    InvalidPincode,
    NotificationFailed,
    RecordNotFound,
    RegistrationBlocked,
    StoreError,
)
from .model import PersonalData, RegistrationRecord, RegistrationStatus
from .ports import IdentifierGenerator, Notifier, PincodeGenerator, RecordStore

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 5

EMAIL_SUBJECT = "Registration pincode"
EMAIL_BODY = "Finalize registration with pincode {pincode}"


@dataclass
class RegistrationService:
    """
    Domain service for patient registration.

    Orchestrates both phases: input validation, pincode delivery,
    record creation, and pincode verification with attempt counting.
    """

    identifier_generator: IdentifierGenerator
    pincode_generator: PincodeGenerator
    notifier: Notifier
    store: RecordStore
    max_attempts: int = MAX_ATTEMPTS

    def initiate_registration(self, personal_data: PersonalData) -> str:
        """
        Start a registration and email the pincode to the applicant.

        The notification is sent before the record is stored, so a record
        only exists for applicants that were reachable.

        Args:
            personal_data: Applicant's identifying fields

        Returns:
            Id of the new PENDING record

        Raises:
            InvalidInput: If full name, national id or email is missing
            NotificationFailed: If the pincode could not be delivered
            InternalError: If the record could not be stored
        """
        self._validate_personal_data(personal_data)

        pincode = self.pincode_generator.generate()
        try:
            self.notifier.send(
                personal_data.email,
                EMAIL_SUBJECT,
                EMAIL_BODY.format(pincode=pincode),
            )
        except Exception as e:
            logger.error("Pincode delivery failed: %s", e)
            raise NotificationFailed(f"Error sending email: {e}") from e

        record = RegistrationRecord(
            id=self.identifier_generator.generate(),
            personal_data=personal_data,
            pincode=pincode,
        )
        try:
            self.store.put(record)
        except StoreError as e:
            # The pincode has already been emailed; the applicant cannot complete.
            logger.error("Storing registration %s failed after pincode delivery: %s", record.id, e)
            raise InternalError(f"Error storing registration: {e}") from e

        logger.info("Started registration %s", record.id)
        return record.id

    def complete_registration(self, record_id: str, pincode: int) -> RegistrationStatus:
        """
        Verify the pincode and finalize the registration.

        Args:
            record_id: Id returned by initiate_registration()
            pincode: Pincode received by email

        Returns:
            RegistrationStatus.REGISTERED

        Raises:
            InvalidInput: If the id is empty or the pincode is not positive
            RecordNotFound: If no pending record exists for the id
            RegistrationBlocked: If the record is blocked
            InvalidPincode: If the pincode does not match (attempt is counted)
            InternalError: If the record store fails
        """
        if not record_id or not record_id.strip():
            raise InvalidInput("Missing registration id")
        if isinstance(pincode, bool) or not isinstance(pincode, int) or pincode <= 0:
            raise InvalidInput("Missing credentials")

        while True:
            record = self._get_record(record_id)

            if record.status == RegistrationStatus.BLOCKED:
                raise RegistrationBlocked(f"Registration {record_id} is blocked")
            if record.status == RegistrationStatus.REGISTERED:
                raise RecordNotFound(f"Registration {record_id} is already completed")

            if self._pincode_matches(record.pincode, pincode):
                updated = record.confirmed()
            else:
                updated = record.with_failed_attempt(self.max_attempts)

            if not self._swap(record, updated):
                logger.debug("Concurrent update on %s, re-reading record", record_id)
                continue

            if updated.status == RegistrationStatus.REGISTERED:
                logger.info("Completed registration %s", record_id)
                return updated.status

            blocked = updated.status == RegistrationStatus.BLOCKED
            if blocked:
                logger.warning(
                    "Registration %s blocked after %d failed attempts",
                    record_id,
                    updated.failed_attempts,
                )
            else:
                logger.warning(
                    "Invalid pincode for %s (attempt %d of %d)",
                    record_id,
                    updated.failed_attempts,
                    self.max_attempts,
                )
            raise InvalidPincode(record_id, updated.failed_attempts, blocked)

    def _validate_personal_data(self, personal_data: PersonalData) -> None:
        """Reject requests missing a mandatory field, before any side effect."""
        if personal_data is None:
            raise InvalidInput("Missing base fields")
        if not _present(personal_data.full_name) or not _present(personal_data.national_id):
            raise InvalidInput("Missing base fields")
        if not _present(personal_data.email):
            raise InvalidInput("Missing email")

    def _get_record(self, record_id: str) -> RegistrationRecord:
        try:
            record = self.store.get(record_id)
        except StoreError as e:
            raise InternalError(f"Error getting registration: {e}") from e
        if record is None:
            raise RecordNotFound(f"Registration {record_id} not found")
        return record

    def _swap(self, current: RegistrationRecord, updated: RegistrationRecord) -> bool:
        try:
            return self.store.compare_and_swap(current.id, current.version, updated)
        except StoreError as e:
            raise InternalError(f"Error storing registration: {e}") from e

    def _pincode_matches(self, expected: int | None, submitted: int) -> bool:
        """
        Compare pincodes in constant time.

        A cleared pincode (None) never matches.
        """
        if expected is None:
            return False
        return secrets.compare_digest(str(expected).encode(), str(submitted).encode())


def _present(value: str | None) -> bool:
    return value is not None and value.strip() != ""
