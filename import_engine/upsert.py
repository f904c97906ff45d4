"""
import_engine.upsert - Create-or-update one mapped record by primary key.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from import_engine.context import RunContext


def upsert(ctx: RunContext, session: Session, record: dict) -> tuple[object, bool]:
    """
    Return (entity, is_update).  An existing entity gets every mapped
    attribute overwritten; otherwise a new one is created from exactly
    the mapped attributes.  Store errors propagate to the caller.
    """
    pk = ctx.importable.pk
    existing = ctx.store.find_one(session, {pk: record[pk]})
    if existing is not None:
        return ctx.store.update(session, existing, record), True
    return ctx.store.create(session, record), False


def update_warning(ctx: RunContext, record: dict) -> str:
    pk = ctx.importable.pk
    return (f"{ctx.scope}.{pk} {record[pk]} already exists, "
            f"updating fields to new values.")
