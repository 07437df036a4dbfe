"""Batch scaling and dilution tools.

These are user-directed ratio computations: each call applies one ratio
or solves one linear equation for a solvent weight. Inputs are never
mutated; a new list of items is returned.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence

from ..data.repository import ReferenceDataRepository, get_repository
from ..models.formula import FormulaItem, Ingredient, SOLVENT_TAG


logger = logging.getLogger(__name__)


# Solvents offered for concentration adjustment: display name -> lookup token
STANDARD_SOLVENTS = {
    "Ethanol": "ethanol",
    "DPG": "dpg",
    "IPM": "ipm",
    "TEC": "tec",
    "BB (Benzyl Benzoate)": "benzyl benzoate",
    "Water (Aqua)": "water",
    "Jojoba Oil": "jojoba",
}

# Common concentration presets (% active material)
CONCENTRATION_PRESETS = {
    "EdT": 15.0,
    "EdP": 20.0,
    "Extrait": 25.0,
}

DEFAULT_SOLVENT_COST = 10.0


class BatchAdjustmentError(ValueError):
    """Raised when a scaling or dilution request cannot be applied."""


def _scaled(items: Sequence[FormulaItem], ratio: float, accord_id: Optional[str] = None) -> list[FormulaItem]:
    return [
        replace(item, weight=item.weight * ratio)
        if accord_id is None or item.accord_id == accord_id
        else item
        for item in items
    ]


class BatchService:
    """Service for scaling formulas and adjusting their concentration."""

    def __init__(self, repository: Optional[ReferenceDataRepository] = None):
        """Initialize the service.

        Args:
            repository: Reference tables used to create new solvent lines.
        """
        self.repository = repository or get_repository()

    @staticmethod
    def aromatic_mass(formula: Sequence[FormulaItem]) -> float:
        """Active mass excluding neat solvent lines."""
        return sum(item.active_mass for item in formula if not item.is_solvent_line)

    def aromatic_percent(self, formula: Sequence[FormulaItem]) -> float:
        """Aromatic material as % of total weight."""
        total_weight = sum(item.weight for item in formula)
        if total_weight <= 0:
            return 0.0
        return self.aromatic_mass(formula) / total_weight * 100

    def scale_to_total(self, formula: Sequence[FormulaItem], target_weight: float) -> list[FormulaItem]:
        """Scale every line so the batch weighs ``target_weight`` grams."""
        if target_weight <= 0:
            raise BatchAdjustmentError("Target weight must be positive")

        total_weight = sum(item.weight for item in formula)
        if total_weight == 0:
            raise BatchAdjustmentError("Cannot scale a formula with zero total weight")

        ratio = target_weight / total_weight
        logger.debug("Scaling %.3f g -> %.3f g (x%.4f)", total_weight, target_weight, ratio)
        return _scaled(formula, ratio)

    def scale_to_ingredient(
        self,
        formula: Sequence[FormulaItem],
        ingredient_id: str,
        target_weight: float,
    ) -> list[FormulaItem]:
        """Scale the formula so one ingredient reaches ``target_weight`` grams.

        The first line linked to ``ingredient_id`` sets the ratio.
        """
        if target_weight <= 0:
            raise BatchAdjustmentError("Target weight must be positive")

        anchor = next((item for item in formula if item.ingredient_id == ingredient_id), None)
        if anchor is None or anchor.weight == 0:
            raise BatchAdjustmentError(f"Ingredient {ingredient_id!r} is not weighed in this formula")

        return _scaled(formula, target_weight / anchor.weight)

    def scale_accord(
        self,
        formula: Sequence[FormulaItem],
        accord_id: str,
        target_weight: float,
    ) -> list[FormulaItem]:
        """Rescale only the lines of one accord to a new accord weight."""
        if target_weight < 0:
            raise BatchAdjustmentError("Target weight must not be negative")

        current_weight = sum(item.weight for item in formula if item.accord_id == accord_id)
        if current_weight <= 0:
            raise BatchAdjustmentError("Cannot scale an empty or zero-weight accord")

        return _scaled(formula, target_weight / current_weight, accord_id=accord_id)

    def adjust_concentration(
        self,
        formula: Sequence[FormulaItem],
        target_percent: float,
        solvent_name: str = "Ethanol",
    ) -> list[FormulaItem]:
        """Add or resize a solvent line so active material is ``target_percent`` of the batch.

        Args:
            formula: Formula line items.
            target_percent: Desired active material share, exclusive 0-100.
            solvent_name: Solvent used to top up, e.g. "Ethanol" or "DPG".

        Returns:
            New formula with the solvent line updated or appended.

        Raises:
            BatchAdjustmentError: If the target cannot be reached by adding solvent.
        """
        if not 0 < target_percent < 100:
            raise BatchAdjustmentError("Target concentration must be between 0 and 100%")

        aromatic_mass = self.aromatic_mass(formula)
        if aromatic_mass == 0:
            raise BatchAdjustmentError("No active aromatic material found in formula")

        total_weight = sum(item.weight for item in formula)
        required_total = aromatic_mass / (target_percent / 100)

        solvent_index = self._find_solvent_line(formula, solvent_name)
        current_solvent_weight = formula[solvent_index].weight if solvent_index is not None else 0.0
        everything_else = total_weight - current_solvent_weight
        new_solvent_weight = required_total - everything_else

        if new_solvent_weight <= 0:
            raise BatchAdjustmentError(
                f"Formula is already weaker than {target_percent}%. Add more concentrate first."
            )

        items = list(formula)
        if solvent_index is not None:
            items[solvent_index] = replace(items[solvent_index], weight=new_solvent_weight)
        else:
            items.append(self._new_solvent_line(solvent_name, new_solvent_weight))

        logger.debug(
            "Adjusted %s to %.3f g for %.1f%% concentrate",
            solvent_name,
            new_solvent_weight,
            target_percent,
        )
        return items

    def _find_solvent_line(self, formula: Sequence[FormulaItem], solvent_name: str) -> Optional[int]:
        name_lower = solvent_name.lower()
        first_word = solvent_name.split(" ")[0].lower()
        for index, item in enumerate(formula):
            item_name = item.name.lower()
            if name_lower in item_name or (item.family == SOLVENT_TAG and first_word in item_name):
                return index
        return None

    def _find_solvent_ingredient(self, solvent_name: str) -> Optional[Ingredient]:
        ingredients = self.repository.get_all_ingredients()
        name_lower = solvent_name.lower()

        match = next((i for i in ingredients if name_lower in i.name.lower()), None)
        if match is None and solvent_name in STANDARD_SOLVENTS:
            token = STANDARD_SOLVENTS[solvent_name]
            match = next((i for i in ingredients if token in i.name.lower()), None)
        if match is None:
            match = next((i for i in ingredients if i.family == SOLVENT_TAG), None)
        return match

    def _new_solvent_line(self, solvent_name: str, weight: float) -> FormulaItem:
        ingredient = self._find_solvent_ingredient(solvent_name)
        return FormulaItem(
            ingredient_id=ingredient.id if ingredient else "custom-solvent",
            name=ingredient.name if ingredient else solvent_name,
            cas_number=ingredient.cas_number if ingredient else "",
            family=SOLVENT_TAG,
            note=SOLVENT_TAG,
            odor_profile=SOLVENT_TAG,
            weight=weight,
            dilution=1.0,
            solvent="None",
            cost_per_kg=ingredient.cost_per_kg if ingredient else DEFAULT_SOLVENT_COST,
        )
