"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory record store
- Mocked notifier and generators with predictable output
- A RegistrationService wired to the above
"""

from itertools import count
from unittest.mock import Mock

import pytest

from patient_registration.adapters.store.memory import InMemoryRecordStore
from patient_registration.domain.model import PersonalData, PostalAddress
from patient_registration.domain.registration import RegistrationService

PINCODE = 12345


@pytest.fixture
def store() -> InMemoryRecordStore:
    """Empty in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def notifier() -> Mock:
    """Notifier mock that accepts every message."""
    return Mock()


@pytest.fixture
def pincode_generator() -> Mock:
    """Pincode generator that always returns PINCODE."""
    generator = Mock()
    generator.generate.return_value = PINCODE
    return generator


@pytest.fixture
def identifier_generator() -> Mock:
    """Identifier generator yielding uid-1, uid-2, ..."""
    generator = Mock()
    counter = count(1)
    generator.generate.side_effect = lambda: f"uid-{next(counter)}"
    return generator


@pytest.fixture
def service(
    store: InMemoryRecordStore,
    notifier: Mock,
    pincode_generator: Mock,
    identifier_generator: Mock,
) -> RegistrationService:
    """RegistrationService with the default attempt limit."""
    return RegistrationService(
        identifier_generator=identifier_generator,
        pincode_generator=pincode_generator,
        notifier=notifier,
        store=store,
    )


@pytest.fixture
def jane() -> PersonalData:
    """Valid applicant data."""
    return PersonalData(
        full_name="Jane Doe",
        national_id="123",
        email="jane@x.com",
        address=PostalAddress(postal_code="1234AB", house_number=7),
    )
