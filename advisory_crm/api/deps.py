"""
API Dependencies Module

This module provides the FastAPI dependency functions shared by the endpoints:
the request-scoped database session, the clock used for "now", and the store
that holds uploaded document files. Tests override these through
``app.dependency_overrides``.
"""
from advisory_crm.core.clock import Clock, utcnow
from advisory_crm.core.config import settings
from advisory_crm.db.session import get_db
from advisory_crm.services.files import FileStore

__all__ = ["get_db", "get_clock", "get_file_store"]


def get_clock() -> Clock:
    """
    Dependency returning the clock every time-dependent rule reads "now" from.

    Date-bucket filters, the pending follow-up window and all audit timestamps
    use it, so overriding it pins the whole request to a fixed instant.
    """
    return utcnow


def get_file_store() -> FileStore:
    """Dependency returning the document file store rooted at ``UPLOAD_DIR``."""
    return FileStore(settings.UPLOAD_DIR)
