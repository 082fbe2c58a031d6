"""
API v1 package.

Contains versioned API routes for the Patient Registration API.
"""

from patient_registration.api.v1.routes import router

__all__ = ["router"]
