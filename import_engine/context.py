"""
import_engine.context - Values passed between the launcher, the worker
and the per-row components.

RunParameters is the only thing that crosses into the worker; it holds
plain strings/ints and round-trips through JSON.  RunContext is built
inside the worker from those parameters and handed explicitly to every
step of the run.
"""

from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import asdict, dataclass, field
from typing import Callable

from sqlalchemy.orm import Session

from db.store import ModelStore
from import_engine.lifecycle import JobLifecycle
from import_engine.registry import ImportableType
from import_engine.report import ImportReport


@dataclass(frozen=True)
class RunParameters:
    scope: str              # importable type name
    job_id: int
    root: str               # storage root
    container: str
    file: str
    container_store: str = "ImportContainer"
    job_log: str = "ImportLog"

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "RunParameters":
        return cls(
            scope=data["scope"],
            job_id=int(data["job_id"]),
            root=data["root"],
            container=data["container"],
            file=data["file"],
            container_store=data.get("container_store", "ImportContainer"),
            job_log=data.get("job_log", "ImportLog"),
        )


@dataclass
class RunContext:
    params: RunParameters
    importable: ImportableType
    store: ModelStore
    lifecycle: JobLifecycle
    session_factory: Callable[[], Session]
    executor: Executor
    strategies: list = field(default_factory=list)
    report: ImportReport = field(default_factory=ImportReport)

    @property
    def scope(self) -> str:
        return self.importable.name
