"""
Generator adapters - Implement IdentifierGenerator and PincodeGenerator protocols.

Identifiers come from uuid4; pincodes come from the secrets module so
they are unpredictable to callers.
"""

import secrets
import uuid


class UuidIdentifierGenerator:
    """
    Implements IdentifierGenerator protocol via random UUIDs.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def generate(self) -> str:
        return str(uuid.uuid4())


class SecretPincodeGenerator:
    """
    Implements PincodeGenerator protocol via cryptographic randomness.

    Pincodes always have exactly `digits` digits, so they are positive
    and never start with zero.
    """

    def __init__(self, digits: int = 5) -> None:
        if digits < 1:
            raise ValueError("Pincode needs at least one digit")
        self._low = 10 ** (digits - 1)
        self._span = 10**digits - self._low

    def generate(self) -> int:
        return self._low + secrets.randbelow(self._span)
