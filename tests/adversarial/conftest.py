"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition and brute force tests.
"""

from collections.abc import Callable
from unittest.mock import Mock

import pytest

from patient_registration.adapters.store.memory import InMemoryRecordStore
from patient_registration.domain.registration import RegistrationService

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture
def make_service() -> Callable[..., RegistrationService]:
    """Factory for a service over a given store; only the complete phase is exercised."""

    def factory(store: InMemoryRecordStore, max_attempts: int = 5) -> RegistrationService:
        return RegistrationService(
            identifier_generator=Mock(),
            pincode_generator=Mock(),
            notifier=Mock(),
            store=store,
            max_attempts=max_attempts,
        )

    return factory
