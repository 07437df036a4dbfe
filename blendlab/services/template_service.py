"""Accord template capture, insertion and import."""

import logging
import math
from dataclasses import replace
from typing import Any, Optional, Sequence
from uuid import uuid4

from ..models.formula import AccordGroup, FormulaItem
from ..models.template import AccordTemplate, AccordTemplateItem, ImportResult


logger = logging.getLogger(__name__)


RATIO_TOLERANCE = 1e-4


class TemplateError(ValueError):
    """Raised when a template cannot be captured or used."""


def _parse_ratio(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        ratio = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(ratio) or ratio <= 0:
        return None
    return ratio


def _parse_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


class TemplateService:
    """Service for reusable accord templates."""

    def capture(self, name: str, items: Sequence[FormulaItem]) -> AccordTemplate:
        """Save formula lines as an accord template of relative ratios.

        Args:
            name: Template name.
            items: Lines making up the accord.

        Returns:
            New AccordTemplate.

        Raises:
            TemplateError: If the name is blank or the lines weigh nothing.
        """
        if not name or not name.strip():
            raise TemplateError("Template name is required")

        total_weight = sum(item.weight for item in items)
        if total_weight <= 0:
            raise TemplateError("Cannot save a template from items with zero total weight")

        template_items = [
            AccordTemplateItem(
                ratio=item.weight / total_weight,
                name=item.name,
                ingredient_id=item.ingredient_id,
                cas_number=item.cas_number,
                family=item.family,
                note=item.note,
                odor_profile=item.odor_profile,
                dilution=item.dilution,
                solvent=item.solvent,
                cost_per_kg=item.cost_per_kg,
                supplier=item.supplier,
                custom_density=item.custom_density,
            )
            for item in items
        ]

        logger.debug("Captured template %r with %d items", name, len(template_items))
        return AccordTemplate(name=name.strip(), items=template_items)

    def instantiate(
        self,
        template: AccordTemplate,
        target_weight: float,
    ) -> tuple[AccordGroup, list[FormulaItem]]:
        """Insert a template as a new accord of ``target_weight`` grams.

        Returns:
            Tuple of (new AccordGroup, formula items assigned to it).
        """
        if target_weight <= 0:
            raise TemplateError("Target weight must be positive")

        group = AccordGroup(id=str(uuid4()), name=template.name)
        items = [
            FormulaItem(
                name=t.name,
                weight=t.ratio * target_weight,
                dilution=t.dilution,
                ingredient_id=t.ingredient_id,
                cas_number=t.cas_number,
                family=t.family,
                note=t.note,
                solvent=t.solvent,
                cost_per_kg=t.cost_per_kg,
                custom_density=t.custom_density,
                accord_id=group.id,
                supplier=t.supplier,
                odor_profile=t.odor_profile,
            )
            for t in template.items
        ]
        return group, items

    def parse_import(self, payload: Any) -> ImportResult:
        """Validate and normalise templates from an imported JSON payload.

        Args:
            payload: A list of templates or ``{"templates": [...]}``.

        Returns:
            ImportResult with the valid templates and skip counters.

        Raises:
            TemplateError: If the payload has neither shape.
        """
        if isinstance(payload, dict):
            raw_templates = payload.get("templates")
        else:
            raw_templates = payload

        if not isinstance(raw_templates, list):
            raise TemplateError("Invalid file format: expected a list of templates")

        result = ImportResult()
        for raw in raw_templates:
            if not isinstance(raw, dict):
                result.skipped_templates += 1
                continue

            name = raw.get("name")
            raw_items = raw.get("items")
            if not isinstance(name, str) or not name.strip() or not isinstance(raw_items, list):
                result.skipped_templates += 1
                continue

            items = []
            for raw_item in raw_items:
                item = self._parse_item(raw_item)
                if item is None:
                    result.skipped_items += 1
                else:
                    items.append(item)

            if not items:
                result.skipped_templates += 1
                continue

            ratio_sum = sum(i.ratio for i in items)
            if abs(ratio_sum - 1.0) > RATIO_TOLERANCE:
                for i in items:
                    i.ratio = i.ratio / ratio_sum

            template = AccordTemplate(name=name.strip(), items=items)
            if isinstance(raw.get("id"), str) and raw["id"]:
                template.id = raw["id"]
            result.templates.append(template)

        logger.info(result.summary)
        return result

    def _parse_item(self, raw: Any) -> Optional[AccordTemplateItem]:
        if not isinstance(raw, dict):
            return None

        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            return None

        ratio = _parse_ratio(raw.get("ratio"))
        if ratio is None:
            return None

        custom_density = _parse_float(raw.get("custom_density"), 0.0)
        return AccordTemplateItem(
            ratio=ratio,
            name=name.strip(),
            ingredient_id=raw.get("ingredient_id") or None,
            cas_number=str(raw.get("cas_number") or ""),
            family=raw.get("family") or "Custom",
            note=raw.get("note") or "Middle",
            odor_profile=str(raw.get("odor_profile") or ""),
            dilution=_parse_float(raw.get("dilution"), 1.0) or 1.0,
            solvent=raw.get("solvent") or "None",
            cost_per_kg=_parse_float(raw.get("cost_per_kg"), 0.0),
            supplier=str(raw.get("supplier") or ""),
            custom_density=custom_density if custom_density > 0 else None,
        )

    def merge(
        self,
        existing: Sequence[AccordTemplate],
        incoming: Sequence[AccordTemplate],
    ) -> list[AccordTemplate]:
        """Append imported templates, re-keying any id that is missing or taken."""
        merged = list(existing)
        used_ids = {t.id for t in merged}

        for template in incoming:
            if not template.id or template.id in used_ids:
                template = replace(template, id=str(uuid4()))
            used_ids.add(template.id)
            merged.append(template)

        return merged
