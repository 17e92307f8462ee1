"""Convenience exports for application schemas."""

from __future__ import annotations

from .act import ActCreateSchema, ActFilterSchema, ActSchema, ActUpdateSchema
from .auth import (
    ChangePasswordSchema,
    LoginResponseSchema,
    LoginSchema,
    LogoutSchema,
    RefreshSchema,
    TokenPairSchema,
    UserSchema,
)
from .common import PaginationQuerySchema, QuerySchema, meta_from
from .employee import (
    AssignmentSchema,
    AssignSiteInputSchema,
    AvailableSitesQuerySchema,
    EmployeeDetailSchema,
    EmployeesBySiteQuerySchema,
    EmployeeSchema,
    EmployeeWithSiteInputSchema,
    EmployeeWithSiteSchema,
    FinalizeInputSchema,
    SiteEmployeeSchema,
    TransferInputSchema,
    TransferSchema,
)
from .principal import (
    AssignInstitutionInputSchema,
    AssignInstitutionSchema,
    AvailableInstitutionsQuerySchema,
    PrincipalCompleteInputSchema,
    PrincipalCompleteSchema,
    PrincipalSummarySchema,
)
from .site import InstitutionSchema, SiteSchema

__all__ = [
    "ActCreateSchema",
    "ActFilterSchema",
    "ActSchema",
    "ActUpdateSchema",
    "ChangePasswordSchema",
    "LoginResponseSchema",
    "LoginSchema",
    "LogoutSchema",
    "RefreshSchema",
    "TokenPairSchema",
    "UserSchema",
    "PaginationQuerySchema",
    "QuerySchema",
    "meta_from",
    "AssignmentSchema",
    "AssignSiteInputSchema",
    "AvailableSitesQuerySchema",
    "EmployeeDetailSchema",
    "EmployeesBySiteQuerySchema",
    "EmployeeSchema",
    "EmployeeWithSiteInputSchema",
    "EmployeeWithSiteSchema",
    "FinalizeInputSchema",
    "SiteEmployeeSchema",
    "TransferInputSchema",
    "TransferSchema",
    "AssignInstitutionInputSchema",
    "AssignInstitutionSchema",
    "AvailableInstitutionsQuerySchema",
    "PrincipalCompleteInputSchema",
    "PrincipalCompleteSchema",
    "PrincipalSummarySchema",
    "InstitutionSchema",
    "SiteSchema",
]
