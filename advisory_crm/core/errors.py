"""
Domain Errors Module

Every domain-service operation either returns its value or raises one of the
errors below. The HTTP layer maps them to status codes in a single place
(see ``advisory_crm.api.errors``).
"""
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError


class DomainError(Exception):
    """Base class for errors raised by the domain services."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """
    Malformed or constraint-violating input.

    Carries one readable entry per violated constraint, not just the first.
    """
    status_code = 400

    def __init__(self, errors: List[str], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message or "Validation error: " + "; ".join(self.errors))

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        errors = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err.get("loc", ()))
            msg = err.get("msg", "Invalid value")
            # Custom validators raise ValueError; pydantic prefixes the message
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
            errors.append(f'{msg} at "{loc}"' if loc else msg)
        return cls(errors)

    @classmethod
    def single(cls, field: str, msg: str) -> "ValidationError":
        return cls([f'{msg} at "{field}"'])


class NotFoundError(DomainError):
    """The referenced entity does not exist for an operation that requires it."""
    status_code = 404

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id
