"""Formula line items and master ingredient records."""

from dataclasses import dataclass, field
from typing import Optional
from uuid import uuid4


# CAS marker for line items that are not a single substance
MIXTURE_CAS = "Mixture"

SOLVENT_TAG = "Solvent"


@dataclass(frozen=True)
class Ingredient:
    """Master ingredient record from the reference list."""
    id: str
    name: str
    cas_number: str = ""
    family: str = ""
    note: str = "Middle"  # Top / Middle / Base / Solvent
    density: float = 1.0  # g/ml
    dilution: float = 1.0  # 1.0 = neat
    solvent: str = "None"
    cost_per_kg: float = 0.0
    odor_profile: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "cas_number": self.cas_number,
            "family": self.family,
            "note": self.note,
            "density": self.density,
            "dilution": self.dilution,
            "solvent": self.solvent,
            "cost_per_kg": self.cost_per_kg,
            "odor_profile": self.odor_profile,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Ingredient":
        """Create from dictionary."""
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            cas_number=data.get("cas_number", ""),
            family=data.get("family", ""),
            note=data.get("note", "Middle"),
            density=data.get("density", 1.0),
            dilution=data.get("dilution", 1.0),
            solvent=data.get("solvent", "None"),
            cost_per_kg=data.get("cost_per_kg", 0.0),
            odor_profile=data.get("odor_profile", ""),
        )


@dataclass(frozen=True)
class FormulaItem:
    """One weighed line in a formula.

    ``dilution`` is the active fraction of ``weight``; the remaining
    ``weight * (1 - dilution)`` grams are carrier named by ``solvent``.
    """
    name: str
    weight: float = 0.0  # grams
    dilution: float = 1.0
    ingredient_id: Optional[str] = None  # None for custom entries
    cas_number: str = ""
    family: str = ""
    note: str = ""
    solvent: str = "None"
    cost_per_kg: float = 0.0
    custom_density: Optional[float] = None
    accord_id: Optional[str] = None
    supplier: str = ""
    odor_profile: str = ""
    uuid: str = field(default_factory=lambda: str(uuid4()))

    @property
    def active_mass(self) -> float:
        """Undiluted aromatic mass carried by this line."""
        return self.weight * self.dilution

    @property
    def is_solvent_line(self) -> bool:
        """True if the line is tagged as a solvent by family or note."""
        return self.family == SOLVENT_TAG or self.note == SOLVENT_TAG

    @property
    def direct_cas(self) -> Optional[str]:
        """CAS usable for direct attribution, or None for blanks and mixtures."""
        cas = (self.cas_number or "").strip()
        if not cas or cas == MIXTURE_CAS:
            return None
        return cas

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "uuid": self.uuid,
            "ingredient_id": self.ingredient_id,
            "name": self.name,
            "cas_number": self.cas_number,
            "family": self.family,
            "note": self.note,
            "weight": self.weight,
            "dilution": self.dilution,
            "solvent": self.solvent,
            "cost_per_kg": self.cost_per_kg,
            "custom_density": self.custom_density,
            "accord_id": self.accord_id,
            "supplier": self.supplier,
            "odor_profile": self.odor_profile,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FormulaItem":
        """Create from dictionary."""
        return cls(
            uuid=data.get("uuid") or str(uuid4()),
            ingredient_id=data.get("ingredient_id"),
            name=data.get("name", ""),
            cas_number=data.get("cas_number", ""),
            family=data.get("family", ""),
            note=data.get("note", ""),
            weight=data.get("weight", 0.0),
            dilution=data.get("dilution", 1.0),
            solvent=data.get("solvent", "None"),
            cost_per_kg=data.get("cost_per_kg", 0.0),
            custom_density=data.get("custom_density"),
            accord_id=data.get("accord_id"),
            supplier=data.get("supplier", ""),
            odor_profile=data.get("odor_profile", ""),
        )

    @classmethod
    def from_ingredient(
        cls,
        ingredient: Ingredient,
        weight: float,
        **overrides,
    ) -> "FormulaItem":
        """Create a line item pre-filled from a master ingredient record."""
        values = {
            "ingredient_id": ingredient.id,
            "name": ingredient.name,
            "cas_number": ingredient.cas_number,
            "family": ingredient.family,
            "note": ingredient.note,
            "weight": weight,
            "dilution": ingredient.dilution,
            "solvent": ingredient.solvent,
            "cost_per_kg": ingredient.cost_per_kg,
            "odor_profile": ingredient.odor_profile,
        }
        values.update(overrides)
        return cls(**values)


@dataclass
class AccordGroup:
    """Named grouping of formula items."""
    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}
