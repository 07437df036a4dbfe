"""Accord template models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4


@dataclass
class AccordTemplateItem:
    """One ingredient of a reusable accord, stored by relative ratio."""
    ratio: float  # share of the accord weight, 0-1
    name: str
    ingredient_id: Optional[str] = None
    cas_number: str = ""
    family: str = "Custom"
    note: str = "Middle"
    odor_profile: str = ""
    dilution: float = 1.0
    solvent: str = "None"
    cost_per_kg: float = 0.0
    supplier: str = ""
    custom_density: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "ratio": self.ratio,
            "name": self.name,
            "ingredient_id": self.ingredient_id,
            "cas_number": self.cas_number,
            "family": self.family,
            "note": self.note,
            "odor_profile": self.odor_profile,
            "dilution": self.dilution,
            "solvent": self.solvent,
            "cost_per_kg": self.cost_per_kg,
            "supplier": self.supplier,
            "custom_density": self.custom_density,
        }


@dataclass
class AccordTemplate:
    """A saved accord that can be inserted into any formula at any weight."""
    name: str
    items: list[AccordTemplateItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid4()))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "items": [i.to_dict() for i in self.items],
        }


@dataclass
class ImportResult:
    """Outcome of importing templates from an external payload."""
    templates: list[AccordTemplate] = field(default_factory=list)
    skipped_templates: int = 0
    skipped_items: int = 0

    @property
    def summary(self) -> str:
        parts = [f"Imported {len(self.templates)} templates."]
        if self.skipped_templates:
            parts.append(f"Skipped {self.skipped_templates} invalid templates.")
        if self.skipped_items:
            parts.append(f"Skipped {self.skipped_items} invalid items.")
        return " ".join(parts)

    def to_dict(self) -> dict:
        return {
            "templates": [t.to_dict() for t in self.templates],
            "skipped_templates": self.skipped_templates,
            "skipped_items": self.skipped_items,
            "summary": self.summary,
        }
