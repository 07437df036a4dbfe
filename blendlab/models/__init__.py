"""Data models for formulation analysis."""

from .formula import Ingredient, FormulaItem, AccordGroup, MIXTURE_CAS
from .regulatory import (
    RestrictionType,
    ComplianceReason,
    ProductType,
    LimitEntry,
    ComplianceResult,
    ComplianceReport,
    IFRA_CATEGORIES,
    PRODUCT_TO_IFRA_CATEGORY,
)
from .naturals import Constituent, ConstituentProfile, HiddenContribution, HiddenMassReport
from .solvent import FlammabilityRating, FlashPointEstimate, SolventBreakdownEntry, SolventAnalysis
from .stats import NoteBreakdown, FormulationStats
from .history import Snapshot, DiffStatus, DiffRow, NoteShift, FormulaDiff
from .template import AccordTemplate, AccordTemplateItem, ImportResult
from .report import FormulationReport

__all__ = [
    "Ingredient",
    "FormulaItem",
    "AccordGroup",
    "MIXTURE_CAS",
    "RestrictionType",
    "ComplianceReason",
    "ProductType",
    "LimitEntry",
    "ComplianceResult",
    "ComplianceReport",
    "IFRA_CATEGORIES",
    "PRODUCT_TO_IFRA_CATEGORY",
    "Constituent",
    "ConstituentProfile",
    "HiddenContribution",
    "HiddenMassReport",
    "FlammabilityRating",
    "FlashPointEstimate",
    "SolventBreakdownEntry",
    "SolventAnalysis",
    "NoteBreakdown",
    "FormulationStats",
    "Snapshot",
    "DiffStatus",
    "DiffRow",
    "NoteShift",
    "FormulaDiff",
    "AccordTemplate",
    "AccordTemplateItem",
    "ImportResult",
    "FormulationReport",
]
