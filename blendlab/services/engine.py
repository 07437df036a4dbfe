"""Formulation engine orchestrating stats, solvent and compliance analysis."""

import logging
from datetime import datetime
from typing import Optional, Sequence
from uuid import uuid4

from ..data.repository import ReferenceDataRepository, get_repository
from ..models.formula import FormulaItem
from ..models.regulatory import ComplianceResult
from ..models.report import FormulationReport
from ..models.solvent import SolventAnalysis
from ..models.stats import FormulationStats

from .ifra_service import IFRAService
from .naturals_service import NaturalsService
from .solvent_service import SolventService
from .stats_service import StatsService


logger = logging.getLogger(__name__)


class FormulationEngine:
    """Main orchestrator for formula analysis.

    Every call recomputes from the formula passed in; nothing is cached
    between calls.
    """

    def __init__(
        self,
        repository: Optional[ReferenceDataRepository] = None,
        solvent_service: Optional[SolventService] = None,
        stats_service: Optional[StatsService] = None,
        naturals_service: Optional[NaturalsService] = None,
        ifra_service: Optional[IFRAService] = None,
    ):
        """Initialize the engine.

        Args:
            repository: Reference tables shared by all services.
            solvent_service: Solvent analyzer.
            stats_service: Batch statistics service.
            naturals_service: Constituent expansion service.
            ifra_service: IFRA compliance service.
        """
        self.repository = repository or get_repository()
        self.solvent_service = solvent_service or SolventService()
        self.stats_service = stats_service or StatsService(self.repository, self.solvent_service)
        self.naturals_service = naturals_service or NaturalsService(self.repository)
        self.ifra_service = ifra_service or IFRAService(self.repository, self.naturals_service)

    def compute_stats(self, formula: Sequence[FormulaItem]) -> FormulationStats:
        """Compute batch totals for a formula."""
        return self.stats_service.compute_stats(formula)

    def analyze_solvents(self, formula: Sequence[FormulaItem]) -> SolventAnalysis:
        """Break down the solvent system of a formula."""
        return self.solvent_service.analyze(formula)

    def check_compliance(
        self,
        formula: Sequence[FormulaItem],
        category: str,
        total_batch_weight: Optional[float] = None,
    ) -> list[ComplianceResult]:
        """Check a formula against one IFRA category.

        Args:
            formula: Formula line items.
            category: IFRA category code.
            total_batch_weight: Concentration basis. Defaults to the formula weight.

        Returns:
            Compliance results, non-compliant first.
        """
        if total_batch_weight is None:
            total_batch_weight = sum(item.weight for item in formula)
        return self.ifra_service.check_compliance(formula, total_batch_weight, category)

    def analyze(self, formula: Sequence[FormulaItem], category: str) -> FormulationReport:
        """Run the full analysis of a formula.

        Args:
            formula: Formula line items.
            category: IFRA category code.

        Returns:
            FormulationReport with stats, note breakdown and compliance.
        """
        stats = self.stats_service.compute_stats(formula)
        notes = self.stats_service.note_breakdown(formula, stats.total_weight)
        compliance = self.ifra_service.build_report(formula, stats.total_weight, category)

        report = FormulationReport(
            formula=list(formula),
            stats=stats,
            notes=notes,
            compliance=compliance,
            report_number=self._generate_report_number(),
        )

        logger.debug(
            "Report %s: %d items, category %s, %d issues",
            report.report_number,
            len(formula),
            category,
            len(compliance.non_compliant_items),
        )
        return report

    def _generate_report_number(self) -> str:
        """Generate a unique report number."""
        date_part = datetime.now().strftime("%Y%m%d")
        unique_part = uuid4().hex[:8].upper()
        return f"BLND-{date_part}-{unique_part}"
