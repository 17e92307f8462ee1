"""Application services: one class per workflow, each owning its transactions."""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from ._shared.dto import PageMeta, PaginationIn
from .acts.service import AdministrativeActService
from .auth.service import AuthService
from .employees.service import EmployeeWorkflowService
from .principals.service import PrincipalWorkflowService
from .sites.service import SiteService

__all__ = [
    "AdministrativeActService",
    "AuthService",
    "BaseService",
    "EmployeeWorkflowService",
    "PageMeta",
    "PaginationIn",
    "PrincipalWorkflowService",
    "ServiceContext",
    "SiteService",
]
