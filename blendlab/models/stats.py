"""Formulation statistics models."""

from dataclasses import dataclass, field

from .solvent import SolventAnalysis


@dataclass
class NoteBreakdown:
    """Active mass per olfactory note, with the remaining solvent mass."""
    top: float = 0.0
    middle: float = 0.0
    base: float = 0.0
    other: float = 0.0
    solvent: float = 0.0

    @property
    def aromatic_mass(self) -> float:
        return self.top + self.middle + self.base + self.other

    def to_dict(self) -> dict:
        return {
            "top": self.top,
            "middle": self.middle,
            "base": self.base,
            "other": self.other,
            "solvent": self.solvent,
        }


@dataclass
class FormulationStats:
    """Batch totals for a formula."""
    total_weight: float = 0.0  # grams
    total_volume: float = 0.0  # ml
    total_cost: float = 0.0
    concentrate_mass: float = 0.0  # undiluted aromatic mass, grams
    ethanol_mass: float = 0.0  # ethanol carrier mass, grams
    solvent_analysis: SolventAnalysis = field(default_factory=SolventAnalysis)

    @property
    def concentrate_percent(self) -> float:
        """Active material as % of total weight."""
        if self.total_weight <= 0:
            return 0.0
        return self.concentrate_mass / self.total_weight * 100.0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_weight": self.total_weight,
            "total_volume": self.total_volume,
            "total_cost": self.total_cost,
            "concentrate_mass": self.concentrate_mass,
            "concentrate_percent": self.concentrate_percent,
            "ethanol_mass": self.ethanol_mass,
            "solvent_analysis": self.solvent_analysis.to_dict(),
        }
