"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Mandatory-field checks live in the domain; these models only shape the payload,
so an absent or blank mandatory field reaches the domain as "" and is
reported as invalid input rather than a schema error.
"""

from enum import Enum

from pydantic import BaseModel, EmailStr, Field, field_validator

from patient_registration.domain.model import PersonalData, PostalAddress

# Upper bound of the PostgreSQL INTEGER column
MAX_HOUSE_NUMBER = 2_147_483_647


class AddressModel(BaseModel):
    """Postal address of the patient."""

    postal_code: str = ""
    house_number: int = Field(default=0, ge=0, le=MAX_HOUSE_NUMBER)


class ContactModel(BaseModel):
    """Contact details of the patient."""

    email_address: EmailStr | None = None

    @field_validator("email_address", mode="before")
    @classmethod
    def blank_as_missing(cls, value: object) -> object:
        """Treat an empty address as absent; malformed addresses still fail validation."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PatientModel(BaseModel):
    """Identifying data of the patient."""

    bsn: str = Field(default="", description="National identifier (BSN)")
    full_name: str = Field(default="", description="Full legal name")
    address: AddressModel | None = None
    contact: ContactModel | None = None

    def to_personal_data(self) -> PersonalData:
        address = self.address or AddressModel()
        email = ""
        if self.contact is not None and self.contact.email_address is not None:
            email = str(self.contact.email_address)
        return PersonalData(
            full_name=self.full_name,
            national_id=self.bsn,
            email=email,
            address=PostalAddress(
                postal_code=address.postal_code,
                house_number=address.house_number,
            ),
        )


class RegisterPatientRequest(BaseModel):
    """Request model for starting a registration."""

    patient: PatientModel = Field(default_factory=PatientModel)


class RegisterPatientResponse(BaseModel):
    """Response model for a started registration."""

    patient_uid: str


class CompleteRegistrationRequest(BaseModel):
    """Request model for completing a registration."""

    pincode: int = Field(..., description="Pincode received by email")


class RegistrationConfirmation(str, Enum):
    REGISTRATION_CONFIRMED = "REGISTRATION_CONFIRMED"


class CompleteRegistrationResponse(BaseModel):
    """Response model for a completed registration."""

    status: RegistrationConfirmation


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
