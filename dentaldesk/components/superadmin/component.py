"""
Super admin component - Operator console.

Shell Layer - converts service results to Output models.
"""

from __future__ import annotations

from uuid import UUID

from ._impl import SuperAdminService
from .models import (
    AddDentistInput,
    DentistOperationOutput,
    LoginInput,
    LoginOutput,
)


def run_login(input_data: LoginInput, service: SuperAdminService) -> LoginOutput:
    token, errors = service.login(input_data.password)
    return LoginOutput(
        token=token,
        expires_in=service.session_ttl_seconds if token else 0,
        errors=tuple(errors),
        success=token is not None,
    )


def run_add_dentist(
    input_data: AddDentistInput,
    service: SuperAdminService,
) -> DentistOperationOutput:
    dentist, errors = service.add_dentist(
        input_data.clinic_id,
        input_data.name,
        input_data.specialization,
    )
    return DentistOperationOutput(
        dentist=dentist,
        errors=tuple(errors),
        success=dentist is not None,
        message=f"Dentist {dentist.name} added successfully" if dentist else "",
    )


def run_delete_dentist(dentist_id: UUID, service: SuperAdminService) -> DentistOperationOutput:
    success, errors = service.delete_dentist(dentist_id)
    return DentistOperationOutput(
        dentist=None,
        errors=tuple(errors),
        success=success,
        message="Dentist deleted successfully" if success else "",
    )
