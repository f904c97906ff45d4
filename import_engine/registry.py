"""
import_engine.registry - Importable model types and collaborator names.

This module owns the name → configuration maps.  They are filled at
import time (Part is registered below) and read-only during a run;
worker processes rebuild them simply by importing the package.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from db.models import Part
from db.store import ModelStore
from import_engine.errors import ImportSetupError
from import_engine.field_map import PART_FIELDS, PART_RELATIONS
from services.container_service import ContainerService
from services.job_service import JobService


@dataclass(frozen=True)
class ImportableType:
    name: str
    model: type
    pk: str
    fields: dict[str, str]
    relations: dict[str, dict[str, str]] = field(default_factory=dict)

    def store(self) -> ModelStore:
        return ModelStore(self.model)


# ── Module-level state ────────────────────────────────────────────────
_types: dict[str, ImportableType] = {}
_collaborators: dict[str, type] = {
    "ImportContainer": ContainerService,
    "ImportLog": JobService,
}


def register(importable: ImportableType) -> ImportableType:
    if importable.pk not in importable.fields:
        raise ImportSetupError(
            f"{importable.name}: primary key {importable.pk!r} has no mapped column"
        )
    _types[importable.name] = importable
    return importable


def unregister(name: str) -> None:
    _types.pop(name, None)


def get(name: str) -> ImportableType:
    try:
        return _types[name]
    except KeyError:
        raise ImportSetupError(f"{name} is not registered for import") from None


def names() -> list[str]:
    return sorted(_types)


def register_collaborator(name: str, impl: type) -> None:
    _collaborators[name] = impl


def collaborator(name: str) -> type:
    impl = _collaborators.get(name)
    if impl is None:
        raise ImportSetupError(
            f"Missing required collaborator {name!r}, verify your setup and configuration"
        )
    return impl


register(ImportableType(
    name="Part",
    model=Part,
    pk="mpn",
    fields=PART_FIELDS,
    relations=PART_RELATIONS,
))
