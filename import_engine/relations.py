"""
import_engine.relations - Attach related rows named by CSV columns.

Each declared relationship gets a strategy, chosen once per run from
the mapper metadata:

    ReferenceRelation   many-to-one / scalar   → set the attribute
    CollectionRelation  one-to-many / m2m      → append to the collection

resolve_all() fans one task per relation out to the run's thread pool
and waits for every one of them.  Each task uses its own session, so a
failure in one relation never rolls back another.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from db.store import COLLECTION, REFERENCE, ModelStore, RelationInfo
from import_engine.context import RunContext
from import_engine.errors import RowError
from import_engine.field_map import lookup_filter
from import_engine.registry import ImportableType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelationOutcome:
    relation: str
    attached: bool = False
    warning: Optional[str] = None
    error: Optional[str] = None


class RelationStrategy:
    kind: str = ""

    def __init__(self, info: RelationInfo, lookup: dict[str, str]):
        self.name = info.name
        self.target = ModelStore(info.target)
        self.lookup = lookup

    def is_attached(self, entity, target) -> bool:
        raise NotImplementedError

    def attach(self, entity, target) -> None:
        raise NotImplementedError


class ReferenceRelation(RelationStrategy):
    kind = REFERENCE

    def is_attached(self, entity, target) -> bool:
        return getattr(entity, self.name) is target

    def attach(self, entity, target) -> None:
        setattr(entity, self.name, target)


class CollectionRelation(RelationStrategy):
    kind = COLLECTION

    def is_attached(self, entity, target) -> bool:
        return target in getattr(entity, self.name)

    def attach(self, entity, target) -> None:
        getattr(entity, self.name).append(target)


_STRATEGIES = {
    REFERENCE: ReferenceRelation,
    COLLECTION: CollectionRelation,
}


def build_strategies(importable: ImportableType) -> list[RelationStrategy]:
    """
    One strategy per configured relation that the model actually
    declares, in configuration order.  Unknown names are ignored.
    """
    declared = importable.store().relations()
    strategies = []
    for name, lookup in importable.relations.items():
        info = declared.get(name)
        if info is None:
            logger.debug("%s has no relationship %r, ignoring", importable.name, name)
            continue
        strategies.append(_STRATEGIES[info.kind](info, lookup))
    return strategies


def resolve_all(ctx: RunContext, identity: tuple, row: dict) -> list[RelationOutcome]:
    """Resolve every relation for one entity; outcomes keep strategy order."""
    futures = [
        (strategy, ctx.executor.submit(_resolve_one, ctx, strategy, identity, row))
        for strategy in ctx.strategies
    ]

    outcomes: list[RelationOutcome] = []
    for strategy, future in futures:
        try:
            outcomes.append(future.result())
        except RowError as exc:
            outcomes.append(RelationOutcome(strategy.name, error=str(exc)))
        except Exception as exc:
            logger.warning("%s.%s failed: %s", ctx.scope, strategy.name, exc)
            outcomes.append(RelationOutcome(
                strategy.name, error=f"{ctx.scope}.{strategy.name}: {exc}",
            ))
    return outcomes


def _resolve_one(
    ctx: RunContext,
    strategy: RelationStrategy,
    identity: tuple,
    row: dict,
) -> RelationOutcome:
    filters = lookup_filter(row, strategy.lookup)
    if filters is None:
        return RelationOutcome(strategy.name)
    # Blank cells cannot match anything; no query against empty strings
    if not any(filters.values()):
        return _not_found(ctx, strategy)

    session = ctx.session_factory()
    try:
        target = strategy.target.find_one(session, filters)
        if target is None:
            return _not_found(ctx, strategy)

        entity = ctx.store.get(session, identity)
        if entity is None:
            raise RowError(f"{ctx.scope} {identity} disappeared before "
                           f"relating {strategy.name}")

        if strategy.is_attached(entity, target):
            return RelationOutcome(
                strategy.name,
                warning=f"{ctx.scope}.{strategy.name} tried to relate existing relation.",
            )

        strategy.attach(entity, target)
        session.commit()
        return RelationOutcome(strategy.name, attached=True)
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def _not_found(ctx: RunContext, strategy: RelationStrategy) -> RelationOutcome:
    return RelationOutcome(
        strategy.name,
        warning=(f"{ctx.scope}.{strategy.name} tried to relate "
                 f"nonexistent instance of {strategy.name}"),
    )
