"""Solvent system breakdown and flash point estimation.

A formula carries solvent in two ways: the carrier part of diluted
materials (``weight * (1 - dilution)``) and neat solvent line items tagged
``Solvent`` by family or note. Both are pooled per normalized solvent name.
"""

import logging
from typing import Optional, Sequence

from ..models.formula import FormulaItem
from ..models.solvent import (
    FlammabilityRating,
    FlashPointEstimate,
    SolventAnalysis,
    SolventBreakdownEntry,
)


logger = logging.getLogger(__name__)


ETHANOL = "Ethanol"

# Standard solvent densities (g/ml)
SOLVENT_DENSITIES = {
    "Ethanol": 0.789,
    "DPG": 1.02,
    "IPM": 0.85,
    "TEC": 1.12,
    "BB": 1.12,
    "Benzyl Benzoate": 1.12,
    "Water": 1.0,
    "Water (Aqua)": 1.0,
}

DEFAULT_SOLVENT_DENSITY = 1.0

# Checked in order; first substring hit wins
SOLVENT_SYNONYMS = (
    (("ethanol", "alcohol"), "Ethanol"),
    (("dpg",), "DPG"),
    (("ipm",), "IPM"),
    (("tec",), "TEC"),
    (("water", "aqua"), "Water"),
    (("bb", "benzyl benzoate"), "BB"),
)

# Ethanol/water closed-cup data: (ethanol % v/v, flash point °C)
FLASH_POINT_CURVE = (
    (0.0, 100.0),
    (5.0, 62.0),
    (10.0, 49.0),
    (20.0, 36.0),
    (30.0, 29.0),
    (40.0, 26.0),
    (50.0, 24.0),
    (60.0, 22.0),
    (70.0, 21.0),
    (80.0, 20.0),
    (90.0, 17.0),
    (100.0, 13.0),
)

PURE_ETHANOL_FLASH_POINT = 13.0
HIGH_FLAMMABILITY_BELOW = 23.0
FLAMMABLE_BELOW = 60.0

FLASH_POINT_WARNINGS = {
    FlammabilityRating.SAFE: "Non-flammable solvent basis",
    FlammabilityRating.HIGH: "High flammability / shipping constraints likely",
    FlammabilityRating.FLAMMABLE: "Flammable - review shipping/storage",
    FlammabilityRating.LOW: "Lower flammability (still validate)",
}


def normalize_solvent_name(name: str) -> str:
    """Map a solvent line item name to its canonical carrier name.

    Args:
        name: Display name of the line item.

    Returns:
        Canonical name, or the name itself for custom carriers.
    """
    lower_name = name.lower()
    for synonyms, canonical in SOLVENT_SYNONYMS:
        if any(s in lower_name for s in synonyms):
            return canonical
    return name


def solvent_density(name: str) -> float:
    """Density (g/ml) of a named carrier; unknown carriers count as 1.0."""
    return SOLVENT_DENSITIES.get(name, DEFAULT_SOLVENT_DENSITY)


def estimate_flash_point(ethanol_vv_pct: float) -> FlashPointEstimate:
    """Estimate the flash point of an ethanol-based solvent system.

    Linearly interpolates the reference curve. Percentages above the last
    control point fall back to the pure ethanol value.

    Args:
        ethanol_vv_pct: Ethanol share of the solvent volume, in percent.

    Returns:
        FlashPointEstimate with rating and warning.
    """
    if ethanol_vv_pct <= 0:
        return FlashPointEstimate(
            celsius=None,
            rating=FlammabilityRating.SAFE,
            warning=FLASH_POINT_WARNINGS[FlammabilityRating.SAFE],
        )

    estimated = PURE_ETHANOL_FLASH_POINT
    for (p1_pct, p1_temp), (p2_pct, p2_temp) in zip(FLASH_POINT_CURVE, FLASH_POINT_CURVE[1:]):
        if p1_pct <= ethanol_vv_pct <= p2_pct:
            ratio = (ethanol_vv_pct - p1_pct) / (p2_pct - p1_pct)
            estimated = p1_temp + ratio * (p2_temp - p1_temp)
            break

    if estimated < HIGH_FLAMMABILITY_BELOW:
        rating = FlammabilityRating.HIGH
    elif estimated < FLAMMABLE_BELOW:
        rating = FlammabilityRating.FLAMMABLE
    else:
        rating = FlammabilityRating.LOW

    return FlashPointEstimate(
        celsius=estimated,
        rating=rating,
        warning=FLASH_POINT_WARNINGS[rating],
    )


class SolventService:
    """Service for solvent breakdown and flammability analysis."""

    def carrier_contribution(self, item: FormulaItem) -> tuple[Optional[str], float]:
        """Work out which carrier a line contributes, and how much of it.

        A diluted line always contributes through its carrier, even when it is
        also tagged as a solvent.

        Args:
            item: Formula line.

        Returns:
            Tuple of (carrier name or None, carrier mass in grams).
        """
        dilution = item.dilution or 1.0

        if dilution < 1:
            name = item.solvent or ETHANOL
            if name == "None":
                name = ETHANOL
            return name, item.weight * (1 - dilution)

        if item.is_solvent_line and dilution == 1:
            return normalize_solvent_name(item.name), item.weight

        return None, 0.0

    def analyze(self, formula: Sequence[FormulaItem]) -> SolventAnalysis:
        """Break the formula's solvent system down by carrier.

        Args:
            formula: Formula line items.

        Returns:
            SolventAnalysis with rows sorted by descending mass.
        """
        masses: dict[str, float] = {}
        volumes: dict[str, float] = {}
        total_mass = 0.0
        total_volume = 0.0

        for item in formula:
            name, added_mass = self.carrier_contribution(item)
            if name is None or added_mass <= 0:
                continue

            added_volume = added_mass / solvent_density(name)
            masses[name] = masses.get(name, 0.0) + added_mass
            volumes[name] = volumes.get(name, 0.0) + added_volume
            total_mass += added_mass
            total_volume += added_volume

        breakdown = [
            SolventBreakdownEntry(
                name=name,
                mass=mass,
                volume=volumes[name],
                mass_pct=(mass / total_mass) * 100 if total_mass > 0 else 0.0,
                vol_pct=(volumes[name] / total_volume) * 100 if total_volume > 0 else 0.0,
            )
            for name, mass in masses.items()
        ]
        breakdown.sort(key=lambda e: e.mass, reverse=True)

        ethanol_volume = volumes.get(ETHANOL, 0.0)
        ethanol_vv_pct = (ethanol_volume / total_volume) * 100 if total_volume > 0 else 0.0

        logger.debug(
            "Solvent analysis: %d carriers, %.3f g, ethanol %.1f%% v/v",
            len(breakdown),
            total_mass,
            ethanol_vv_pct,
        )

        return SolventAnalysis(
            breakdown=breakdown,
            total_solvent_mass=total_mass,
            total_solvent_volume=total_volume,
            ethanol_vv_pct=ethanol_vv_pct,
            flash_point=estimate_flash_point(ethanol_vv_pct),
        )
