"""Snapshot and version comparison models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import uuid4

from .formula import FormulaItem


class DiffStatus(Enum):
    """Change status of one ingredient between two versions."""
    NEW = "NEW"
    REMOVED = "REMOVED"
    MODIFIED = "MODIFIED"
    UNCHANGED = "UNCHANGED"


# Sort precedence, highest first
DIFF_STATUS_RANK = {
    DiffStatus.NEW: 3,
    DiffStatus.REMOVED: 2,
    DiffStatus.MODIFIED: 1,
    DiffStatus.UNCHANGED: 0,
}


@dataclass
class Snapshot:
    """A named copy of a formula at a point in time."""
    name: str
    formula: list[FormulaItem] = field(default_factory=list)
    note: str = ""
    timestamp: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid4()))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "note": self.note,
            "timestamp": self.timestamp.isoformat(),
            "formula": [item.to_dict() for item in self.formula],
        }


@dataclass
class DiffRow:
    """Aggregated weight change of one ingredient."""
    key: str
    name: str
    current: float
    previous: float
    status: DiffStatus

    @property
    def delta(self) -> float:
        return self.current - self.previous

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.name,
            "current": self.current,
            "previous": self.previous,
            "delta": self.delta,
            "status": self.status.value,
        }


@dataclass
class NoteShift:
    """Share of one note (% of total weight) in both versions."""
    note: str
    current: float
    previous: float

    @property
    def delta(self) -> float:
        return self.current - self.previous

    def to_dict(self) -> dict:
        return {
            "note": self.note,
            "current": self.current,
            "previous": self.previous,
            "delta": self.delta,
        }


@dataclass
class FormulaDiff:
    """Comparison of a current formula against a snapshot."""
    rows: list[DiffRow] = field(default_factory=list)
    note_summary: list[NoteShift] = field(default_factory=list)

    def count(self, status: DiffStatus) -> int:
        return sum(1 for r in self.rows if r.status == status)

    @property
    def changed_rows(self) -> list[DiffRow]:
        return [r for r in self.rows if r.status != DiffStatus.UNCHANGED]

    def to_dict(self) -> dict:
        return {
            "rows": [r.to_dict() for r in self.rows],
            "note_summary": [n.to_dict() for n in self.note_summary],
            "counts": {s.value: self.count(s) for s in DiffStatus},
        }
