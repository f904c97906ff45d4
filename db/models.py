"""
db.models - SQLAlchemy ORM declarations.

Tables
------
import_jobs     - one audit record per import run: status plus ordered
                  warning / error entries ({line, row, message}).
parts           - inventory parts, keyed for import by MPN.
manufacturers   - referenced by parts (many-to-one).
suppliers       - linked to parts through part_suppliers (many-to-many).
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, DateTime, Text, ForeignKey, Table, JSON,
)
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class JobStatus(str, enum.Enum):
    PENDING    = "PENDING"
    PROCESSING = "PROCESSING"
    FINISHED   = "FINISHED"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = [JobStatus.PENDING, JobStatus.PROCESSING, JobStatus.FINISHED]


class JobStateError(Exception):
    """Raised on a status regression or a write to a finished job."""
    pass


class ImportJob(Base):
    __tablename__ = "import_jobs"

    id          = Column(Integer, primary_key=True, autoincrement=True)
    target_type = Column(String(100), nullable=False, index=True)
    date        = Column(DateTime, default=_utcnow)
    status      = Column(String(20), nullable=False, default=JobStatus.PENDING.value)

    # ── Audit trail (append-only, occurrence order) ────────────────────
    warnings = Column(MutableList.as_mutable(JSON), nullable=False, default=list)
    errors   = Column(MutableList.as_mutable(JSON), nullable=False, default=list)

    # ── Staged file coordinates ────────────────────────────────────────
    container   = Column(String(300), default="")
    file_name   = Column(String(300), default="")
    finished_at = Column(DateTime, nullable=True)

    # ── State transitions ──────────────────────────────────────────────
    def advance(self, status: JobStatus) -> None:
        current = JobStatus(self.status)
        if current is JobStatus.FINISHED:
            raise JobStateError(f"ImportJob {self.id} is already FINISHED")
        if status.rank < current.rank:
            raise JobStateError(
                f"ImportJob {self.id} cannot go from {current.value} to {status.value}"
            )
        self.status = status.value
        if status is JobStatus.FINISHED:
            self.finished_at = _utcnow()

    def add_warning(self, line: int, row: dict, message: str) -> None:
        self._ensure_open()
        self.warnings.append({"line": line, "row": dict(row), "message": message})

    def add_error(self, line: int, row: dict, message: str) -> None:
        self._ensure_open()
        self.errors.append({"line": line, "row": dict(row), "message": message})

    def _ensure_open(self) -> None:
        if self.status == JobStatus.FINISHED.value:
            raise JobStateError(f"ImportJob {self.id} is FINISHED and immutable")

    # ── Serialisation ──────────────────────────────────────────────────
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "target_type": self.target_type,
            "date": self.date.isoformat() if self.date else "",
            "status": self.status,
            "container": self.container or "",
            "file_name": self.file_name or "",
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "warnings": list(self.warnings or []),
            "errors": list(self.errors or []),
        }


# ── Inventory models (import targets) ─────────────────────────────────

part_suppliers = Table(
    "part_suppliers",
    Base.metadata,
    Column("part_id", Integer,
           ForeignKey("parts.id", ondelete="CASCADE"), primary_key=True),
    Column("supplier_id", Integer,
           ForeignKey("suppliers.id", ondelete="CASCADE"), primary_key=True),
)


class Manufacturer(Base):
    __tablename__ = "manufacturers"

    id      = Column(Integer, primary_key=True, autoincrement=True)
    name    = Column(String(200), unique=True, nullable=False, index=True)
    website = Column(String(300), default="")

    parts = relationship("Part", back_populates="manufacturer")


class Supplier(Base):
    __tablename__ = "suppliers"

    id    = Column(Integer, primary_key=True, autoincrement=True)
    code  = Column(String(50), unique=True, nullable=False, index=True)
    name  = Column(String(200), default="")
    email = Column(String(200), default="", index=True)


class Part(Base):
    __tablename__ = "parts"

    id  = Column(Integer, primary_key=True, autoincrement=True)
    mpn = Column(String(200), unique=True, nullable=False, index=True)

    # ── Frequently-queried direct columns ──────────────────────────────
    value       = Column(String(200), default="")
    description = Column(Text, default="")
    quantity    = Column(String(50), default="")
    location    = Column(String(200), default="")
    datasheet   = Column(Text, default="")

    manufacturer_id = Column(Integer, ForeignKey("manufacturers.id"), nullable=True)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    manufacturer = relationship("Manufacturer", back_populates="parts")
    suppliers    = relationship("Supplier", secondary=part_suppliers,
                                lazy="selectin")

    def to_dict(self) -> dict:
        return {
            "mpn": self.mpn,
            "value": self.value or "",
            "description": self.description or "",
            "quantity": self.quantity or "",
            "location": self.location or "",
            "datasheet": self.datasheet or "",
            "manufacturer": self.manufacturer.name if self.manufacturer else "",
            "suppliers": [s.code for s in self.suppliers],
            "created_at": self.created_at.isoformat() if self.created_at else "",
        }
