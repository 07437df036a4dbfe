"""Batch statistics for a formula."""

import logging
from typing import Optional, Sequence

from ..data.repository import ReferenceDataRepository, get_repository
from ..models.formula import FormulaItem
from ..models.stats import FormulationStats, NoteBreakdown
from .solvent_service import ETHANOL, SolventService


logger = logging.getLogger(__name__)


DEFAULT_DENSITY = 1.0


class StatsService:
    """Service computing weight, volume, cost and active mass totals."""

    def __init__(
        self,
        repository: Optional[ReferenceDataRepository] = None,
        solvent_service: Optional[SolventService] = None,
    ):
        """Initialize the service.

        Args:
            repository: Reference tables used for density lookup.
            solvent_service: Solvent analyzer. Creates one if not provided.
        """
        self.repository = repository or get_repository()
        self.solvent_service = solvent_service or SolventService()

    def resolve_density(self, item: FormulaItem) -> float:
        """Density of a line: custom value, then master record, then 1.0.

        Non-positive densities are treated as unresolvable.
        """
        if item.custom_density is not None and item.custom_density > 0:
            return item.custom_density

        ingredient = self.repository.get_ingredient(item.ingredient_id)
        if ingredient and ingredient.density > 0:
            return ingredient.density

        return DEFAULT_DENSITY

    def compute_stats(self, formula: Sequence[FormulaItem]) -> FormulationStats:
        """Compute batch totals and the embedded solvent analysis.

        Args:
            formula: Formula line items.

        Returns:
            FormulationStats for the whole formula.
        """
        total_weight = 0.0
        total_volume = 0.0
        total_cost = 0.0
        concentrate_mass = 0.0

        for item in formula:
            total_weight += item.weight
            total_volume += item.weight / self.resolve_density(item)
            total_cost += (item.weight / 1000) * item.cost_per_kg
            concentrate_mass += item.weight * item.dilution

        solvent_analysis = self.solvent_service.analyze(formula)
        ethanol_entry = solvent_analysis.get_entry(ETHANOL)

        logger.debug(
            "Stats for %d items: %.3f g, %.3f ml, %.3f g active",
            len(formula),
            total_weight,
            total_volume,
            concentrate_mass,
        )

        return FormulationStats(
            total_weight=total_weight,
            total_volume=total_volume,
            total_cost=total_cost,
            concentrate_mass=concentrate_mass,
            ethanol_mass=ethanol_entry.mass if ethanol_entry else 0.0,
            solvent_analysis=solvent_analysis,
        )

    def note_breakdown(
        self,
        formula: Sequence[FormulaItem],
        total_weight: Optional[float] = None,
    ) -> NoteBreakdown:
        """Split active mass by olfactory note.

        Args:
            formula: Formula line items.
            total_weight: Batch weight. Summed from the formula if not given.

        Returns:
            NoteBreakdown where ``solvent`` is everything that is not aromatic.
        """
        if total_weight is None:
            total_weight = sum(item.weight for item in formula)

        breakdown = NoteBreakdown()
        for item in formula:
            active = item.active_mass
            note = (item.note or "").lower()

            if note == "top":
                breakdown.top += active
            elif note in ("middle", "heart"):
                breakdown.middle += active
            elif note == "base":
                breakdown.base += active
            elif note == "solvent":
                continue
            else:
                breakdown.other += active

        breakdown.solvent = max(0.0, total_weight - breakdown.aromatic_mass)
        return breakdown
