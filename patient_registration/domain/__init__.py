"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for the patient
registration state machine. It defines its own port interfaces for
infrastructure abstraction, so adapters can be swapped freely.
"""

from .exceptions import (
    ErrorKind,
    InternalError,
    InvalidInput,
    InvalidPincode,
    NotificationFailed,
    RecordNotFound,
    RegistrationBlocked,
    RegistrationError,
    StoreError,
)
from .model import PersonalData, PostalAddress, RegistrationRecord, RegistrationStatus
from .ports import IdentifierGenerator, Notifier, PincodeGenerator, RecordStore
from .registration import RegistrationService

__all__ = [
    "ErrorKind",
    "IdentifierGenerator",
    "InternalError",
    "InvalidInput",
    "InvalidPincode",
    "NotificationFailed",
    "Notifier",
    "PersonalData",
    "PincodeGenerator",
    "PostalAddress",
    "RecordNotFound",
    "RecordStore",
    "RegistrationBlocked",
    "RegistrationError",
    "RegistrationRecord",
    "RegistrationService",
    "RegistrationStatus",
    "StoreError",
]
