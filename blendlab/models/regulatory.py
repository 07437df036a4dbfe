"""Core regulatory data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class RestrictionType(Enum):
    """Kind of entry in the regulatory limit library."""
    RESTRICTED = "restricted"
    PROHIBITED = "prohibited"
    SPECIFICATION = "specification"  # informational, no limit


class ComplianceReason(Enum):
    """Why a substance appears in a compliance report."""
    PROHIBITED = "Prohibited"
    RESTRICTION = "Restriction"


class ProductType(Enum):
    """Consumer product types with different regulatory requirements."""
    LIP_PRODUCT = "lip_product"
    DEODORANT = "deodorant"
    HYDROALCOHOLIC_UNSHAVED = "hydroalcoholic_unshaved"
    FINE_FRAGRANCE = "fine_fragrance"
    BODY_LOTION = "body_lotion"
    FACE_CREAM = "face_cream"
    HAND_CREAM = "hand_cream"
    BABY_PRODUCT = "baby_product"
    MOUTHWASH = "mouthwash"
    SHAMPOO = "shampoo"
    HAIR_STYLING = "hair_styling"
    HAIR_DYE = "hair_dye"
    SOAP = "soap"
    BODY_WASH = "body_wash"
    HOUSEHOLD_CLEANER = "household_cleaner"
    LAUNDRY_DETERGENT = "laundry_detergent"
    CANDLE = "candle"
    REED_DIFFUSER = "reed_diffuser"
    AIR_FRESHENER = "air_freshener"


# IFRA usage categories (51st Amendment numbering)
IFRA_CATEGORIES = {
    "1": "Lip products",
    "2": "Deodorants and antiperspirants",
    "3": "Hydroalcoholics for shaved skin, eye products",
    "4": "Fine fragrance",
    "5A": "Body lotion",
    "5B": "Face moisturizer",
    "5C": "Hand cream",
    "5D": "Baby creams and oils",
    "6": "Mouthwash and toothpaste",
    "7A": "Rinse-off hair products",
    "7B": "Leave-on hair products",
    "8": "Intimate wipes, hair dyes",
    "9": "Rinse-off soaps and body washes",
    "10A": "Household cleaning products",
    "10B": "Household aerosols and laundry",
    "11A": "Candles (no skin contact)",
    "11B": "Diffusers (incidental skin contact)",
    "12": "Air fresheners (no skin contact)",
}


PRODUCT_TO_IFRA_CATEGORY = {
    ProductType.LIP_PRODUCT: "1",
    ProductType.DEODORANT: "2",
    ProductType.HYDROALCOHOLIC_UNSHAVED: "3",
    ProductType.FINE_FRAGRANCE: "4",
    ProductType.BODY_LOTION: "5A",
    ProductType.FACE_CREAM: "5B",
    ProductType.HAND_CREAM: "5C",
    ProductType.BABY_PRODUCT: "5D",
    ProductType.MOUTHWASH: "6",
    ProductType.SHAMPOO: "7A",
    ProductType.HAIR_STYLING: "7B",
    ProductType.HAIR_DYE: "8",
    ProductType.SOAP: "9",
    ProductType.BODY_WASH: "9",
    ProductType.HOUSEHOLD_CLEANER: "10A",
    ProductType.LAUNDRY_DETERGENT: "10B",
    ProductType.CANDLE: "11A",
    ProductType.REED_DIFFUSER: "11B",
    ProductType.AIR_FRESHENER: "12",
}


@dataclass(frozen=True)
class LimitEntry:
    """Regulatory limit library entry for one CAS number.

    ``limits`` maps IFRA category codes to a maximum concentration in
    percent (0-100) of the finished batch.
    """
    cas_number: str
    name: str
    restriction_type: RestrictionType = RestrictionType.RESTRICTED
    limits: dict[str, float] = field(default_factory=dict)
    amendment: Optional[str] = None

    @property
    def is_prohibited(self) -> bool:
        return self.restriction_type == RestrictionType.PROHIBITED

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "cas_number": self.cas_number,
            "name": self.name,
            "type": self.restriction_type.value,
            "limits": dict(self.limits),
            "amendment": self.amendment,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LimitEntry":
        """Create from dictionary.

        Unrecognised types are read as informational specifications.
        """
        try:
            restriction_type = RestrictionType(data.get("type", "restricted"))
        except ValueError:
            restriction_type = RestrictionType.SPECIFICATION
        return cls(
            cas_number=data.get("cas_number", ""),
            name=data.get("name", ""),
            restriction_type=restriction_type,
            limits={str(k): float(v) for k, v in (data.get("limits") or {}).items()},
            amendment=data.get("amendment"),
        )


@dataclass
class ComplianceResult:
    """Aggregated check of one regulated CAS number."""
    cas_number: str
    name: str
    total_mass: float  # grams, direct + hidden
    concentration: float  # decimal fraction of batch weight
    limit: float  # decimal fraction
    is_compliant: bool
    sources: list[str] = field(default_factory=list)
    reason: ComplianceReason = ComplianceReason.RESTRICTION

    @property
    def concentration_percent(self) -> float:
        return self.concentration * 100.0

    @property
    def limit_percent(self) -> float:
        return self.limit * 100.0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "cas_number": self.cas_number,
            "name": self.name,
            "total_mass": self.total_mass,
            "concentration": self.concentration,
            "limit": self.limit,
            "is_compliant": self.is_compliant,
            "sources": list(self.sources),
            "reason": self.reason.value,
        }


@dataclass
class ComplianceReport:
    """Compliance results for one formula and usage category."""
    category: str
    total_batch_weight: float
    results: list[ComplianceResult] = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_compliant(self) -> bool:
        """Check if all results are compliant."""
        return all(r.is_compliant for r in self.results)

    @property
    def non_compliant_items(self) -> list[ComplianceResult]:
        """Get list of non-compliant results."""
        return [r for r in self.results if not r.is_compliant]

    @property
    def prohibited_items(self) -> list[ComplianceResult]:
        """Get results for prohibited substances."""
        return [r for r in self.results if r.reason == ComplianceReason.PROHIBITED]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "category": self.category,
            "category_label": IFRA_CATEGORIES.get(self.category),
            "total_batch_weight": self.total_batch_weight,
            "results": [r.to_dict() for r in self.results],
            "generated_at": self.generated_at.isoformat(),
            "is_compliant": self.is_compliant,
        }
