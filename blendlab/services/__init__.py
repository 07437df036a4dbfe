"""Business logic services for formulation analysis."""

from .solvent_service import SolventService, estimate_flash_point, normalize_solvent_name
from .stats_service import StatsService
from .naturals_service import NaturalsService
from .ifra_service import IFRAService
from .batch_service import BatchService, BatchAdjustmentError
from .template_service import TemplateService, TemplateError
from .history_service import HistoryService
from .engine import FormulationEngine

__all__ = [
    "SolventService",
    "estimate_flash_point",
    "normalize_solvent_name",
    "StatsService",
    "NaturalsService",
    "IFRAService",
    "BatchService",
    "BatchAdjustmentError",
    "TemplateService",
    "TemplateError",
    "HistoryService",
    "FormulationEngine",
]
