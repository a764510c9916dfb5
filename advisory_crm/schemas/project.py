"""
Project Schemas Module

Create/update schemas apply the inbound normalization rules for projects:
trimmed names, defaulted type and status, the yes/no invoice flag, lenient
dates and numeric-or-string foreign keys.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from advisory_crm.models.project import (
    ActiveStage, AffiliatePartner, ProjectCategory, ProjectStatus, ProjectType,
)
from advisory_crm.schemas.common import (
    CamelModel, UTCDateTime, blank_to_none, normalize_invoice_flag,
    parse_optional_datetime, reject_explicit_nulls, require_min_length, with_extra_errors,
)
from advisory_crm.schemas.team_member import TeamMemberSummary


def type_requirement_errors(
    project_type: Optional[str],
    affiliate_partner: Optional[str],
    category: Optional[str],
) -> List[str]:
    """Affiliate projects need a partner, "other" projects need a category."""
    errors = []
    if project_type == ProjectType.affiliate.value and not affiliate_partner:
        errors.append("Affiliate partner is required for affiliate projects")
    if project_type == ProjectType.other.value and not category:
        errors.append("Category is required for other projects")
    return errors


def raw_value(payload: Any, field: str) -> Tuple[bool, Any]:
    """
    Look up ``field`` in an unvalidated payload by its camelCase or snake_case key.

    Returns ``(present, value)`` with blank strings read as None. Used to keep
    checking cross-field rules once field validation has already failed.
    """
    if isinstance(payload, dict):
        for key in (to_camel(field), field):
            if key in payload:
                return True, blank_to_none(payload[key])
    return False, None


def raw_id(payload: Any, field: str) -> Optional[int]:
    """An id from an unvalidated payload, or None when absent or not an integer."""
    _, value = raw_value(payload, field)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


class _ProjectFields(CamelModel):
    """Validators shared by the create and update schemas."""
    # Partner, category and stage are validated as enums but stored as plain text
    model_config = ConfigDict(use_enum_values=True)

    @field_validator("phone_number", "poc", "active_stage", "affiliate_partner", "category",
                     "assigned_to_id", "client_id", mode="before", check_fields=False)
    @classmethod
    def blank_is_unset(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("has_invoice", mode="before", check_fields=False)
    @classmethod
    def coerce_invoice(cls, v: Any) -> Any:
        return normalize_invoice_flag(v)

    @field_validator("last_contacted", mode="before", check_fields=False)
    @classmethod
    def parse_last_contacted(cls, v: Any) -> Optional[datetime]:
        return parse_optional_datetime(v)

    @field_validator("name", check_fields=False)
    @classmethod
    def check_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return require_min_length(v, "Name")


class ProjectCreate(_ProjectFields):
    """Schema for creating a project."""
    name: str
    phone_number: Optional[str] = None
    poc: Optional[str] = None
    type: str = ProjectType.direct.value
    affiliate_partner: Optional[AffiliatePartner] = None
    category: Optional[ProjectCategory] = None
    last_contacted: Optional[datetime] = None
    status: str = ProjectStatus.active.value
    active_stage: Optional[ActiveStage] = None
    has_invoice: str = "no"
    assigned_to_id: Optional[int] = None
    client_id: Optional[int] = None

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, v: Any) -> Any:
        return blank_to_none(v) or ProjectType.direct.value

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        return blank_to_none(v) or ProjectStatus.active.value

    @model_validator(mode="wrap")
    @classmethod
    def check_type_requirements(cls, data: Any, handler) -> "ProjectCreate":
        try:
            model = handler(data)
        except PydanticValidationError as exc:
            # Field errors stop the model from being built; report the type rule alongside them
            _, project_type = raw_value(data, "type")
            _, partner = raw_value(data, "affiliate_partner")
            _, category = raw_value(data, "category")
            errors = type_requirement_errors(project_type or ProjectType.direct.value, partner, category)
            if not errors:
                raise
            raise with_extra_errors(exc, cls.__name__, errors) from None

        errors = type_requirement_errors(model.type, model.affiliate_partner, model.category)
        if errors:
            raise ValueError("; ".join(errors))
        return model


class ProjectUpdate(_ProjectFields):
    """
    Schema for updating a project.

    Only fields present in the payload are applied; an explicit null clears a
    nullable field, which is different from leaving the key out.
    """
    name: Optional[str] = None
    phone_number: Optional[str] = None
    poc: Optional[str] = None
    type: Optional[str] = None
    affiliate_partner: Optional[AffiliatePartner] = None
    category: Optional[ProjectCategory] = None
    last_contacted: Optional[datetime] = None
    status: Optional[str] = None
    active_stage: Optional[ActiveStage] = None
    has_invoice: Optional[str] = None
    assigned_to_id: Optional[int] = None
    client_id: Optional[int] = None

    @field_validator("type")
    @classmethod
    def check_type(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v:
            raise ValueError("Type is required")
        return v

    @field_validator("status")
    @classmethod
    def check_status(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v:
            raise ValueError("Status is required")
        return v

    @model_validator(mode="after")
    def check_nulls(self) -> "ProjectUpdate":
        reject_explicit_nulls(self, {
            "name": "name",
            "type": "type",
            "status": "status",
            "assigned_to_id": "assignedToId",
        })
        return self

    def changes(self) -> Dict[str, Any]:
        """Column values to apply, keyed by model attribute."""
        return self.model_dump(exclude_unset=True)


class ProjectFilters(CamelModel):
    """Query filters for project listings. None or "all" imposes no constraint."""
    status: Optional[str] = None
    assigned_to_id: Optional[str] = Field(default=None, alias="assignedTo")
    type: Optional[str] = None
    last_contacted: Optional[str] = None


class ProjectRead(CamelModel):
    """Schema for reading a project joined with its assignee's public fields."""
    id: int
    name: str
    phone_number: Optional[str] = None
    poc: Optional[str] = None
    type: str
    affiliate_partner: Optional[str] = None
    category: Optional[str] = None
    last_contacted: Optional[UTCDateTime] = None
    status: str
    active_stage: Optional[str] = None
    has_invoice: str
    assigned_to_id: int
    client_id: Optional[int] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime
    assigned_to: Optional[TeamMemberSummary] = None


class RecentActivity(CamelModel):
    description: str
    timestamp: str


class ProjectStats(CamelModel):
    total_projects: int
    new_projects_this_month: int
    status_counts: Dict[str, int]
    completion_rate: int
    pending_followups: int
    recent_activities: List[RecentActivity]
