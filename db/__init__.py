"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    get_session()   → new Session
    ModelStore      → record access for the import engine
    ImportJob, Part, Manufacturer, Supplier → ORM models
"""

from db.engine import init_db, get_session, is_initialised, dispose_db  # noqa: F401
from db.models import (                                                  # noqa: F401
    Base, ImportJob, JobStatus, JobStateError,
    Part, Manufacturer, Supplier,
)
from db.store import ModelStore, RelationInfo                            # noqa: F401
