"""Combined formulation report model."""

from dataclasses import dataclass, field
from datetime import datetime

from .formula import FormulaItem
from .regulatory import ComplianceReport
from .stats import FormulationStats, NoteBreakdown


@dataclass
class FormulationReport:
    """Stats, note split and compliance for one formula snapshot."""
    formula: list[FormulaItem]
    stats: FormulationStats
    notes: NoteBreakdown
    compliance: ComplianceReport
    report_number: str
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_compliant(self) -> bool:
        return self.compliance.is_compliant

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "report_number": self.report_number,
            "generated_at": self.generated_at.isoformat(),
            "formula": [item.to_dict() for item in self.formula],
            "stats": self.stats.to_dict(),
            "notes": self.notes.to_dict(),
            "compliance": self.compliance.to_dict(),
            "is_compliant": self.is_compliant,
        }
