"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Depends, Request

from patient_registration.adapters.generators import SecretPincodeGenerator, UuidIdentifierGenerator
from patient_registration.config.settings import Settings, get_settings
from patient_registration.domain.ports import Notifier, RecordStore
from patient_registration.domain.registration import RegistrationService

# Module-level singleton - UuidIdentifierGenerator is stateless
_identifier_generator = UuidIdentifierGenerator()


def get_store(request: Request) -> RecordStore:
    """
    Get record store from app state.

    The store is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.store


def get_notifier(request: Request) -> Notifier:
    """Get notifier from app state."""
    return request.app.state.notifier


def get_registration_service(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the generators, notifier and record store for the domain service.
    """
    return RegistrationService(
        identifier_generator=_identifier_generator,
        pincode_generator=SecretPincodeGenerator(settings.pincode_digits),
        notifier=get_notifier(request),
        store=get_store(request),
        max_attempts=settings.max_attempts,
    )
