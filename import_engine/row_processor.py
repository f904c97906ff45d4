"""
import_engine.row_processor - Take one CSV row through the pipeline.

    map  →  upsert (own session, committed)  →  relations (fan-out/fan-in)

Single-responsibility: given the run context and a dict-row, return a
RowResult listing the outcome plus the warnings and errors to record,
in the order they occurred.  Store failures never escape process().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from import_engine import relations
from import_engine.context import RunContext
from import_engine.errors import RowError
from import_engine.field_map import map_row
from import_engine.upsert import update_warning, upsert

logger = logging.getLogger(__name__)

SKIPPED = "skipped"
CREATED = "created"
UPDATED = "updated"
FAILED  = "failed"


@dataclass
class RowResult:
    outcome: str
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def describe(exc: Exception) -> str:
    if isinstance(exc, RowError):
        return str(exc)
    return f"Unexpected: {exc}"


class RowProcessor:

    def process(self, ctx: RunContext, row: dict) -> RowResult:
        record = map_row(row, ctx.importable.fields, ctx.importable.pk)
        if record is None:
            return RowResult(SKIPPED)

        try:
            identity, is_update = self._upsert(ctx, record)
        except Exception as exc:
            logger.warning("%s upsert failed for %s: %s",
                           ctx.scope, record[ctx.importable.pk], exc)
            return RowResult(FAILED, errors=[describe(exc)])

        result = RowResult(UPDATED if is_update else CREATED)
        if is_update:
            result.warnings.append(update_warning(ctx, record))

        for outcome in relations.resolve_all(ctx, identity, row):
            if outcome.warning:
                result.warnings.append(outcome.warning)
            if outcome.error:
                result.errors.append(outcome.error)
        return result

    # ── Private helpers ────────────────────────────────────────────────

    @staticmethod
    def _upsert(ctx: RunContext, record: dict) -> tuple[tuple, bool]:
        session = ctx.session_factory()
        try:
            entity, is_update = upsert(ctx, session, record)
            session.commit()
            return ctx.store.identity_of(entity), is_update
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
