from .partner_core import PartnerCreate, PartnerUpdate, PartnerResponse, PartnerStatsResponse
from .student import StudentCreate, StudentUpdate, StudentResponse, EnrollmentCreate, EnrollmentUpdate, EnrollmentResponse

__all__ = [
    "PartnerCreate",
    "PartnerUpdate",
    "PartnerResponse",
    "PartnerStatsResponse",
    "StudentCreate",
    "StudentUpdate",
    "StudentResponse",
    "EnrollmentCreate",
    "EnrollmentUpdate",
    "EnrollmentResponse",
]
