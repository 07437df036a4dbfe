"""Solvent system and flammability models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class FlammabilityRating(Enum):
    """Flash point rating bands."""
    SAFE = "Safe"
    LOW = "Low"
    FLAMMABLE = "Flammable"
    HIGH = "High"


@dataclass(frozen=True)
class FlashPointEstimate:
    """Estimated closed-cup flash point of the solvent system.

    This is a safety estimate interpolated from ethanol/water reference
    data, not a measurement.
    """
    celsius: Optional[float]
    rating: FlammabilityRating
    warning: str
    is_estimate: bool = True

    def to_dict(self) -> dict:
        return {
            "celsius": self.celsius,
            "rating": self.rating.value,
            "warning": self.warning,
            "is_estimate": self.is_estimate,
        }


@dataclass
class SolventBreakdownEntry:
    """Accumulated carrier mass and volume for one solvent name."""
    name: str
    mass: float  # grams
    volume: float  # ml
    mass_pct: float  # % of total solvent mass
    vol_pct: float  # % of total solvent volume

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "mass": self.mass,
            "volume": self.volume,
            "mass_pct": self.mass_pct,
            "vol_pct": self.vol_pct,
        }


@dataclass
class SolventAnalysis:
    """Solvent breakdown of a formula with its flash point estimate."""
    breakdown: list[SolventBreakdownEntry] = field(default_factory=list)
    total_solvent_mass: float = 0.0
    total_solvent_volume: float = 0.0
    ethanol_vv_pct: float = 0.0  # ethanol volume / total solvent volume * 100
    flash_point: Optional[FlashPointEstimate] = None

    def get_entry(self, name: str) -> Optional[SolventBreakdownEntry]:
        """Get the breakdown row for a solvent name."""
        for entry in self.breakdown:
            if entry.name == name:
                return entry
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "breakdown": [e.to_dict() for e in self.breakdown],
            "total_solvent_mass": self.total_solvent_mass,
            "total_solvent_volume": self.total_solvent_volume,
            "ethanol_vv_pct": self.ethanol_vv_pct,
            "flash_point": self.flash_point.to_dict() if self.flash_point else None,
        }
