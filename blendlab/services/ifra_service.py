"""IFRA compliance service.

Regulated mass is aggregated per CAS number from two independent passes:
the line's own CAS (direct) and the constituent profile of its linked
ingredient (hidden). Both passes feed one accumulator, so a substance added
directly and also carried by a natural material is checked on its total.
"""

import logging
from typing import Optional, Sequence

from ..data.repository import ReferenceDataRepository, get_repository
from ..models.formula import FormulaItem
from ..models.regulatory import (
    ComplianceReason,
    ComplianceReport,
    ComplianceResult,
    LimitEntry,
    ProductType,
    IFRA_CATEGORIES,
    PRODUCT_TO_IFRA_CATEGORY,
)
from .naturals_service import NaturalsService


logger = logging.getLogger(__name__)


UNRESTRICTED_LIMIT = 100.0


class IFRAService:
    """Service for checking formulas against the IFRA limit library."""

    def __init__(
        self,
        repository: Optional[ReferenceDataRepository] = None,
        naturals_service: Optional[NaturalsService] = None,
    ):
        """Initialize the service.

        Args:
            repository: Reference tables holding the limit library.
            naturals_service: Constituent expansion service. Creates one if not provided.
        """
        self.repository = repository or get_repository()
        self.naturals_service = naturals_service or NaturalsService(self.repository)

    @staticmethod
    def resolve_limit(entry: LimitEntry, category: str) -> float:
        """Maximum concentration (percent) allowed for a category.

        Prohibited substances are always 0. A category without a recorded
        limit is unrestricted.
        """
        if entry.is_prohibited:
            return 0.0
        if category in entry.limits:
            return entry.limits[category]
        return UNRESTRICTED_LIMIT

    def aggregate_mass(
        self,
        formula: Sequence[FormulaItem],
    ) -> tuple[dict[str, float], dict[str, list[str]]]:
        """Accumulate active mass per CAS from direct and hidden attribution.

        Args:
            formula: Formula line items.

        Returns:
            Tuple of:
            - Dictionary mapping CAS number to total mass in grams
            - Dictionary mapping CAS number to distinct source descriptions
        """
        mass_by_cas: dict[str, float] = {}
        sources_by_cas: dict[str, dict[str, None]] = {}

        def add(cas_number: str, mass: float, source: str) -> None:
            mass_by_cas[cas_number] = mass_by_cas.get(cas_number, 0.0) + mass
            sources_by_cas.setdefault(cas_number, {})[source] = None

        for item in formula:
            direct_cas = item.direct_cas
            if direct_cas:
                add(direct_cas, item.weight * item.dilution, item.name)

            for contribution in self.naturals_service.expand_item(item):
                add(contribution.cas_number, contribution.mass, contribution.source_label)

        return mass_by_cas, {cas: list(s) for cas, s in sources_by_cas.items()}

    def check_compliance(
        self,
        formula: Sequence[FormulaItem],
        total_batch_weight: float,
        category: str,
    ) -> list[ComplianceResult]:
        """Check every regulated substance in a formula for one category.

        Args:
            formula: Formula line items.
            total_batch_weight: Batch weight in grams (the concentration basis).
            category: IFRA category code, e.g. "4" or "5A".

        Returns:
            One result per regulated CAS, non-compliant results first.
        """
        if total_batch_weight == 0:
            return []

        if category not in IFRA_CATEGORIES:
            logger.debug("Category %r is not a known IFRA category", category)

        mass_by_cas, sources_by_cas = self.aggregate_mass(formula)

        results: list[ComplianceResult] = []
        for cas_number, total_mass in mass_by_cas.items():
            entry = self.repository.get_limit_entry(cas_number)
            if entry is None:
                continue

            concentration = total_mass / total_batch_weight
            limit = self.resolve_limit(entry, category) / 100.0

            results.append(
                ComplianceResult(
                    cas_number=cas_number,
                    name=entry.name,
                    total_mass=total_mass,
                    concentration=concentration,
                    limit=limit,
                    is_compliant=concentration <= limit,
                    sources=sources_by_cas.get(cas_number, []),
                    reason=ComplianceReason.PROHIBITED if entry.is_prohibited else ComplianceReason.RESTRICTION,
                )
            )

        # stable: keeps accumulation order within each group
        results.sort(key=lambda r: r.is_compliant)

        logger.debug(
            "Category %s: %d regulated substances, %d non-compliant",
            category,
            len(results),
            sum(1 for r in results if not r.is_compliant),
        )
        return results

    def build_report(
        self,
        formula: Sequence[FormulaItem],
        total_batch_weight: float,
        category: str,
    ) -> ComplianceReport:
        """Run a compliance check and wrap it in a report."""
        return ComplianceReport(
            category=category,
            total_batch_weight=total_batch_weight,
            results=self.check_compliance(formula, total_batch_weight, category),
        )

    def get_category_limits(self, cas_number: str) -> dict[str, float]:
        """Get all category limits for a substance.

        Args:
            cas_number: CAS registry number.

        Returns:
            Dictionary mapping category codes to limits in percent.
        """
        entry = self.repository.get_limit_entry(cas_number)
        if not entry:
            return {}

        return {category: self.resolve_limit(entry, category) for category in IFRA_CATEGORIES}

    def get_ifra_category(self, product_type: ProductType) -> str:
        """Get the IFRA category code for a product type."""
        return PRODUCT_TO_IFRA_CATEGORY.get(product_type, "4")
