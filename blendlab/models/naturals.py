"""Natural complex substance models for hidden-constituent tracking.

Natural raw materials (essential oils, absolutes) carry their own CAS or the
``Mixture`` marker, yet contain regulated single substances. A profile lists
those constituents and the fraction of the parent mass each represents.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Constituent:
    """A regulated substance occurring inside a natural material."""
    name: str
    cas_number: str
    fraction: float  # decimal share of the parent mass

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "cas_number": self.cas_number,
            "fraction": self.fraction,
        }


@dataclass(frozen=True)
class ConstituentProfile:
    """Constituent expansion entry for one master ingredient id."""
    ingredient_id: str
    constituents: tuple[Constituent, ...] = ()
    source: str = ""  # literature reference for the figures

    def get_constituent(self, cas_number: str) -> Optional[Constituent]:
        """Get a specific constituent by CAS number."""
        for c in self.constituents:
            if c.cas_number == cas_number:
                return c
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "ingredient_id": self.ingredient_id,
            "constituents": [c.to_dict() for c in self.constituents],
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ConstituentProfile":
        """Create from dictionary."""
        return cls(
            ingredient_id=data.get("ingredient_id", ""),
            constituents=tuple(
                Constituent(
                    name=c.get("name", ""),
                    cas_number=c.get("cas_number", ""),
                    fraction=c.get("fraction", 0.0),
                )
                for c in data.get("constituents", [])
            ),
            source=data.get("source", ""),
        )


@dataclass
class HiddenContribution:
    """Mass of one constituent contributed by one formula line."""
    item_name: str
    ingredient_id: str
    constituent_name: str
    cas_number: str
    mass: float  # grams

    @property
    def source_label(self) -> str:
        """Source description used in compliance reports."""
        return f"{self.item_name} (Hidden {self.constituent_name})"

    def to_dict(self) -> dict:
        return {
            "item_name": self.item_name,
            "ingredient_id": self.ingredient_id,
            "constituent_name": self.constituent_name,
            "cas_number": self.cas_number,
            "mass": self.mass,
        }


@dataclass
class HiddenMassReport:
    """Hidden-constituent totals for a whole formula."""
    mass_by_cas: dict[str, float] = field(default_factory=dict)
    contributions: list[HiddenContribution] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "mass_by_cas": dict(self.mass_by_cas),
            "contributions": [c.to_dict() for c in self.contributions],
        }
