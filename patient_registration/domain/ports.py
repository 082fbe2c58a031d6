"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import Protocol

from .model import RegistrationRecord


class IdentifierGenerator(Protocol):
    """Port interface for record identifier generation."""

    def generate(self) -> str:
        """
        Produce a new opaque identifier.

        Must never return a value it returned before.
        """
        ...


class PincodeGenerator(Protocol):
    """Port interface for pincode generation."""

    def generate(self) -> int:
        """Produce a positive pincode that is unpredictable to callers."""
        ...


class Notifier(Protocol):
    """Port interface for message delivery."""

    def send(self, address: str, subject: str, body: str) -> None:
        """
        Deliver a message to an address.

        Args:
            address: Destination email address
            subject: Message subject
            body: Message body

        Raises:
            Exception: Any delivery failure. The coordinator treats every
                failure as fatal to the initiate phase.
        """
        ...


class RecordStore(Protocol):
    """
    Port interface for registration persistence.

    Every single call must be atomic and thread-safe for a given key.
    Implementations raise StoreError when the storage engine fails.
    """

    def put(self, record: RegistrationRecord) -> None:
        """Write a record unconditionally, keyed by its id."""
        ...

    def get(self, record_id: str) -> RegistrationRecord | None:
        """
        Read a record by id.

        Returns:
            The stored record (with its current version), or None if absent
        """
        ...

    def compare_and_swap(
        self, record_id: str, expected_version: int, record: RegistrationRecord
    ) -> bool:
        """
        Replace a record only if its stored version is still expected_version.

        On success the record is stored with version expected_version + 1.

        Returns:
            True if the record was replaced, False if another writer got there first
            or the record no longer exists
        """
        ...
