"""
db.store - Record-level access to one mapped model.

The import engine only talks to host models through ModelStore:
find-by-filter, create, update, identity reload, and the declared
relationship metadata.  Session management is the caller's
responsibility, as with the other services.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session


# Relation kinds
REFERENCE  = "reference"
COLLECTION = "collection"


@dataclass(frozen=True)
class RelationInfo:
    name: str
    target: type
    kind: str


class ModelStore:

    def __init__(self, model: type):
        self.model = model

    @property
    def name(self) -> str:
        return self.model.__name__

    # ── Lookups ────────────────────────────────────────────────────────

    def find_one(self, session: Session, filters: dict):
        """Return the first instance matching every filter, or None."""
        stmt = select(self.model).filter_by(**filters).limit(1)
        return session.scalars(stmt).first()

    def get(self, session: Session, identity):
        return session.get(self.model, identity)

    @staticmethod
    def identity_of(entity) -> tuple:
        return inspect(entity).identity

    # ── Writes ─────────────────────────────────────────────────────────

    def create(self, session: Session, attrs: dict):
        entity = self.model(**attrs)
        session.add(entity)
        session.flush()
        return entity

    @staticmethod
    def update(session: Session, entity, attrs: dict):
        for key, val in attrs.items():
            setattr(entity, key, val)
        session.flush()
        return entity

    # ── Metadata ───────────────────────────────────────────────────────

    def relations(self) -> dict[str, RelationInfo]:
        """Declared relationships: name → RelationInfo."""
        out: dict[str, RelationInfo] = {}
        for prop in inspect(self.model).relationships:
            kind = COLLECTION if prop.uselist else REFERENCE
            out[prop.key] = RelationInfo(prop.key, prop.mapper.class_, kind)
        return out
