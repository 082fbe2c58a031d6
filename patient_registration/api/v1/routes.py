"""
API v1 routes.

Defines REST endpoints for the Patient Registration API:
- POST /v1/registrations - Begin registration, pincode is emailed
- POST /v1/registrations/{patient_uid}/complete - Confirm with the pincode

Handlers are plain functions so FastAPI runs them in its threadpool;
the domain service performs blocking I/O (SMTP, database).
"""

from fastapi import APIRouter, Depends, HTTPException, status

from patient_registration.api.dependencies import get_registration_service
from patient_registration.api.models import (
    CompleteRegistrationRequest,
    CompleteRegistrationResponse,
    ErrorResponse,
    RegisterPatientRequest,
    RegisterPatientResponse,
    RegistrationConfirmation,
)
from patient_registration.domain.exceptions import ErrorKind, RegistrationError
from patient_registration.domain.registration import RegistrationService

router = APIRouter(tags=["v1"])

# Error kind -> (HTTP status, client-facing detail)
_ERROR_RESPONSES = {
    ErrorKind.INVALID_INPUT: (status.HTTP_400_BAD_REQUEST, "Invalid request"),
    ErrorKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Registration not found"),
    ErrorKind.BLOCKED: (status.HTTP_403_FORBIDDEN, "Registration blocked"),
    ErrorKind.INVALID_PINCODE: (status.HTTP_401_UNAUTHORIZED, "Invalid pincode"),
    ErrorKind.NOTIFICATION_FAILED: (status.HTTP_502_BAD_GATEWAY, "Pincode could not be sent"),
    ErrorKind.INTERNAL: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal error"),
}


def _to_http_exception(error: RegistrationError) -> HTTPException:
    status_code, detail = _ERROR_RESPONSES[error.kind]
    if error.kind == ErrorKind.INVALID_INPUT:
        detail = f"{detail}: {error}"
    return HTTPException(status_code=status_code, detail=detail)


@router.post(
    "/registrations",
    response_model=RegisterPatientResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Missing mandatory patient data"},
        422: {"description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Registration could not be stored"},
        502: {"model": ErrorResponse, "description": "Pincode email could not be sent"},
    },
    summary="Register a new patient",
    description="Submit patient data to begin registration. "
    "A pincode will be sent to the patient's email address.",
)
def register_patient(
    request_data: RegisterPatientRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterPatientResponse:
    """
    Register a patient and send the pincode.

    - **patient.bsn**: National identifier
    - **patient.full_name**: Full legal name
    - **patient.contact.email_address**: Where the pincode is sent

    Returns the patient uid needed to complete the registration.
    """
    try:
        patient_uid = service.initiate_registration(request_data.patient.to_personal_data())
    except RegistrationError as e:
        raise _to_http_exception(e) from None
    return RegisterPatientResponse(patient_uid=patient_uid)


@router.post(
    "/registrations/{patient_uid}/complete",
    response_model=CompleteRegistrationResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid pincode"},
        403: {"model": ErrorResponse, "description": "Registration blocked"},
        404: {"model": ErrorResponse, "description": "Registration not found"},
        400: {"model": ErrorResponse, "description": "Missing id or non-positive pincode"},
        422: {"description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Registration could not be stored"},
    },
    summary="Complete registration with pincode",
    description="Submit the pincode received via email to confirm the registration. "
    "After too many incorrect pincodes the registration is blocked permanently.",
)
def complete_registration(
    patient_uid: str,
    request_data: CompleteRegistrationRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> CompleteRegistrationResponse:
    """
    Complete a registration.

    - **pincode**: Pincode from the registration email
    """
    try:
        service.complete_registration(patient_uid, request_data.pincode)
    except RegistrationError as e:
        raise _to_http_exception(e) from None
    return CompleteRegistrationResponse(status=RegistrationConfirmation.REGISTRATION_CONFIRMED)
