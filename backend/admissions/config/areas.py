"""Area Registry - Static configuration of reachable areas and home areas

Maps roles (staff) and statuses (students) to the areas they may open and to
their canonical landing area. Supplied to the access policy as configuration
so new roles and areas can be added without touching engine logic.
"""
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, model_validator

from ..domain.enums import ApplicationStatus, Role
from ..domain.errors import AreaRegistryError
from .settings import settings


class AreaGrant(BaseModel):
    """Areas unlocked for one role or status, plus its landing area"""

    home: str = Field(..., description="Canonical landing area")
    areas: List[str] = Field(default_factory=list, description="Areas beyond the common set")


class AreaRegistry(BaseModel):
    """Role/status to area configuration"""

    sign_in_area: str = Field(default="/auth")
    public_areas: List[str] = Field(
        default_factory=list,
        description="Informational areas open to everyone, including inactive subjects"
    )
    common_areas: List[str] = Field(
        default_factory=list,
        description="Areas open to every active signed-in subject"
    )
    inactive_home: str = Field(default="/")
    role_grants: Dict[Role, AreaGrant] = Field(default_factory=dict)
    status_grants: Dict[ApplicationStatus, AreaGrant] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_consistency(self) -> "AreaRegistry":
        missing_statuses = [s.value for s in ApplicationStatus if s not in self.status_grants]
        if missing_statuses:
            raise AreaRegistryError(
                "Area registry is missing status grants",
                details={"statuses": missing_statuses}
            )

        missing_roles = [
            r.value for r in Role
            if r != Role.STUDENT and r not in self.role_grants
        ]
        if missing_roles:
            raise AreaRegistryError(
                "Area registry is missing role grants",
                details={"roles": missing_roles}
            )

        if self.inactive_home not in self.public_areas:
            raise AreaRegistryError(
                "Inactive home area must be a public area",
                details={"inactive_home": self.inactive_home}
            )

        # A home that is not itself reachable would make guard redirects loop
        base = set(self.public_areas) | set(self.common_areas)
        grants = list(self.role_grants.items()) + list(self.status_grants.items())
        for key, grant in grants:
            if grant.home not in base and grant.home not in grant.areas:
                raise AreaRegistryError(
                    f"Home area {grant.home} is not reachable for {key.value}",
                    details={"key": key.value, "home": grant.home}
                )
        return self


def default_area_registry(sign_in_area: Optional[str] = None) -> AreaRegistry:
    """Built-in areas of the admissions portal"""
    return AreaRegistry(
        sign_in_area=sign_in_area or settings.sign_in_area,
        public_areas=["/", "/about", "/contact", "/programs"],
        common_areas=["/", "/about", "/contact", "/programs", "/profile"],
        inactive_home="/",
        role_grants={
            Role.GUEST: AreaGrant(home="/"),
            Role.PARENT: AreaGrant(home="/documents", areas=["/documents", "/encrypted-billing"]),
            Role.TEACHER: AreaGrant(home="/teacher-dashboard", areas=["/teacher-dashboard"]),
            Role.REGISTRAR: AreaGrant(home="/registrar-dashboard", areas=["/registrar-dashboard"]),
            Role.ACCOUNTANT: AreaGrant(home="/accountant-dashboard", areas=["/accountant-dashboard"]),
            Role.SUPER_ADMIN: AreaGrant(home="/admin-dashboard", areas=["/admin-dashboard"]),
        },
        status_grants={
            ApplicationStatus.APPLICANT: AreaGrant(
                home="/applicant-dashboard",
                areas=["/applicant-dashboard", "/book-consultation"]
            ),
            ApplicationStatus.CONSULTATION_PENDING: AreaGrant(
                home="/applicant-dashboard",
                areas=["/applicant-dashboard"]
            ),
            ApplicationStatus.CONSULTATION_COMPLETED: AreaGrant(
                home="/applicant-dashboard",
                areas=["/applicant-dashboard"]
            ),
            ApplicationStatus.PAYMENT_PENDING: AreaGrant(
                home="/billing",
                areas=["/applicant-dashboard", "/billing"]
            ),
            ApplicationStatus.ENROLLMENT_SUBMITTED: AreaGrant(
                home="/applicant-dashboard",
                areas=["/applicant-dashboard", "/enrollment"]
            ),
            ApplicationStatus.STUDENT: AreaGrant(
                home="/student-dashboard",
                areas=["/student-dashboard", "/billing", "/documents", "/encrypted-billing"]
            ),
        },
    )


def load_area_registry(path: str) -> AreaRegistry:
    """Load an area registry from a JSON file"""
    raw = Path(path).read_text(encoding="utf-8")
    return AreaRegistry.model_validate_json(raw)


@lru_cache()
def get_area_registry() -> AreaRegistry:
    """Get cached area registry (file override if configured)"""
    if settings.area_registry_path:
        return load_area_registry(settings.area_registry_path)
    return default_area_registry()
