"""Services subpackage — query execution and result shaping."""

from buscadog.services.clinics import ClinicQueryService, get_clinic_service

__all__ = [
    "ClinicQueryService",
    "get_clinic_service",
]
