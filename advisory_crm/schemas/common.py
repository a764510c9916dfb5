"""
Shared schema plumbing and the inbound-payload coercion rules.

Request bodies arrive as untyped dicts from the browser. The helpers here turn
loosely-typed values into the stored representation and never raise for the
two fields the dashboard is known to send sloppily (dates and the invoice
flag): bad input degrades to a default and is logged instead.
"""
import logging
from datetime import date, datetime, timezone
from typing import Annotated, Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from advisory_crm.core.errors import ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _serialize_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat().replace("+00:00", "Z")


# Timestamps are stored as naive UTC; on the wire they carry an explicit "Z"
UTCDateTime = Annotated[datetime, PlainSerializer(_serialize_utc, when_used="json")]


class CamelModel(BaseModel):
    """Base for API schemas: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


def validate_payload(schema: Type[ModelT], payload: Any) -> ModelT:
    """Validate ``payload`` against ``schema``, raising the domain ValidationError."""
    try:
        return schema.model_validate(payload if payload is not None else {})
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


def with_extra_errors(
    exc: PydanticValidationError, title: str, messages: List[str]
) -> PydanticValidationError:
    """Rebuild ``exc`` with model-level ``messages`` appended to its field errors."""
    line_errors = [
        {
            "type": PydanticCustomError("invalid", "{reason}", {"reason": err["msg"]}),
            "loc": err["loc"],
            "input": err.get("input"),
        }
        for err in exc.errors()
    ]
    line_errors.extend(
        {"type": PydanticCustomError("invalid", "{reason}", {"reason": msg}), "loc": (), "input": None}
        for msg in messages
    )
    return PydanticValidationError.from_exception_data(title, line_errors)


def normalize_invoice_flag(value: Any) -> Any:
    """
    Coerce the invoice flag to its stored two-valued text form.

    Booleans and numbers map to "yes"/"no"; the strings "true"/"false" map
    case-insensitively; every other string passes through unchanged. Absent
    or unsupported values become "no". Applying it twice is the same as once.
    """
    if value is None:
        return "no"
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (int, float)):
        return "yes" if value > 0 else "no"
    if isinstance(value, str):
        lowered = value.lower()
        if lowered == "true":
            return "yes"
        if lowered == "false":
            return "no"
        if value not in ("yes", "no"):
            logger.warning("Unrecognised hasInvoice value %r stored as-is", value)
        return value
    return "no"


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_optional_datetime(value: Any, field: str = "lastContacted") -> Optional[datetime]:
    """
    Parse an optional timestamp without ever raising.

    Accepts ISO-8601 strings (date-only, offset or trailing "Z"), datetimes and
    dates. Blank or unparseable input becomes None; the latter is logged so bad
    client input stays visible even though the request succeeds.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _to_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return _to_naive_utc(datetime.fromisoformat(text))
        except ValueError:
            logger.warning("Invalid date received for %s: %r, storing null", field, value)
            return None
    logger.warning("Unsupported %s value %r, storing null", field, value)
    return None


def blank_to_none(value: Any) -> Any:
    """Empty form fields ("") mean "not set"."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def require_min_length(value: str, label: str, minimum: int = 2) -> str:
    if len(value) < minimum:
        raise ValueError(f"{label} must be at least {minimum} characters")
    return value


def reject_explicit_nulls(model: BaseModel, fields: Dict[str, str]) -> None:
    """Fail when a non-nullable field was sent as an explicit null."""
    nulled = [
        label for name, label in fields.items()
        if name in model.model_fields_set and getattr(model, name) is None
    ]
    if nulled:
        raise ValueError(f"{', '.join(nulled)} cannot be null")
