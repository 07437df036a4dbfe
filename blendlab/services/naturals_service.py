"""Natural materials service for hidden-constituent expansion.

Formula lines linked to a master ingredient with a constituent profile
contribute ``active mass * fraction`` of every listed constituent, on top of
whatever the line's own CAS contributes.
"""

import logging
from typing import Optional, Sequence

from ..data.repository import ReferenceDataRepository, get_repository
from ..models.formula import FormulaItem
from ..models.naturals import ConstituentProfile, HiddenContribution, HiddenMassReport


logger = logging.getLogger(__name__)


class NaturalsService:
    """Service for natural material composition and hidden constituents."""

    def __init__(self, repository: Optional[ReferenceDataRepository] = None):
        """Initialize the service.

        Args:
            repository: Reference tables holding the constituent profiles.
        """
        self.repository = repository or get_repository()

    def get_profile(self, ingredient_id: Optional[str]) -> Optional[ConstituentProfile]:
        """Get the constituent profile of a master ingredient.

        Args:
            ingredient_id: Master ingredient id.

        Returns:
            ConstituentProfile if one is recorded, None otherwise.
        """
        return self.repository.get_constituent_profile(ingredient_id)

    def has_profile(self, ingredient_id: Optional[str]) -> bool:
        """Check if an ingredient id has a constituent profile."""
        return self.get_profile(ingredient_id) is not None

    def expand_item(self, item: FormulaItem) -> list[HiddenContribution]:
        """Expand one formula line into its hidden constituents.

        Args:
            item: Formula line.

        Returns:
            One contribution per listed constituent, in profile order.
        """
        profile = self.get_profile(item.ingredient_id)
        if not profile:
            return []

        active_mass = item.weight * item.dilution
        return [
            HiddenContribution(
                item_name=item.name,
                ingredient_id=profile.ingredient_id,
                constituent_name=constituent.name,
                cas_number=constituent.cas_number,
                mass=active_mass * constituent.fraction,
            )
            for constituent in profile.constituents
        ]

    def calculate_hidden_mass(self, formula: Sequence[FormulaItem]) -> HiddenMassReport:
        """Total the hidden constituent mass of a formula per CAS number.

        Args:
            formula: Formula line items.

        Returns:
            HiddenMassReport with per-CAS totals and every contribution.
        """
        report = HiddenMassReport()
        for item in formula:
            for contribution in self.expand_item(item):
                report.contributions.append(contribution)
                report.mass_by_cas[contribution.cas_number] = (
                    report.mass_by_cas.get(contribution.cas_number, 0.0) + contribution.mass
                )

        logger.debug(
            "Expanded %d hidden contributions across %d CAS numbers",
            len(report.contributions),
            len(report.mass_by_cas),
        )
        return report

    def get_constituent_sources(self, cas_number: str) -> list[tuple[ConstituentProfile, float]]:
        """Find all profiles containing a specific constituent.

        Args:
            cas_number: CAS of the constituent.

        Returns:
            List of (ConstituentProfile, fraction) tuples, highest fraction first.
        """
        sources = []
        for profile in self.repository.get_all_constituent_profiles():
            constituent = profile.get_constituent(cas_number)
            if constituent:
                sources.append((profile, constituent.fraction))

        return sorted(sources, key=lambda s: s[1], reverse=True)
