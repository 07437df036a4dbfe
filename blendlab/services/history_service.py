"""Version comparison between a formula and a saved snapshot."""

import logging
from typing import Sequence

from ..models.formula import FormulaItem
from ..models.history import (
    DIFF_STATUS_RANK,
    DiffRow,
    DiffStatus,
    FormulaDiff,
    NoteShift,
    Snapshot,
)


logger = logging.getLogger(__name__)


WEIGHT_EPSILON = 1e-6

SUMMARY_NOTES = ("Top", "Middle", "Base")


def _note_bucket(note: str) -> str:
    note = (note or "").lower()
    if "heart" in note:
        return "middle"
    return note


class HistoryService:
    """Service comparing formula versions ingredient by ingredient."""

    @staticmethod
    def stable_key(item: FormulaItem) -> str:
        """Identity used to match lines across versions.

        Lines are matched by master ingredient id, then by CAS, then by name.
        """
        if item.ingredient_id:
            return item.ingredient_id
        cas = (item.cas_number or "").strip()
        if len(cas) > 4:
            return f"cas:{cas}"
        return f"name:{item.name.strip().lower()}"

    def _aggregate(self, formula: Sequence[FormulaItem], names: dict[str, str]) -> dict[str, float]:
        weights: dict[str, float] = {}
        for item in formula:
            key = self.stable_key(item)
            weights[key] = weights.get(key, 0.0) + item.weight
            names.setdefault(key, item.name)
        return weights

    @staticmethod
    def note_shares(formula: Sequence[FormulaItem]) -> dict[str, float]:
        """Share of total weight (percent) per Top/Middle/Base note."""
        total = sum(item.weight for item in formula)
        shares = {note: 0.0 for note in SUMMARY_NOTES}
        if total <= 0:
            return shares

        for note in SUMMARY_NOTES:
            weight = sum(i.weight for i in formula if _note_bucket(i.note) == note.lower())
            shares[note] = weight / total * 100
        return shares

    def diff(self, current: Sequence[FormulaItem], snapshot: Snapshot) -> FormulaDiff:
        """Compare the current formula with a snapshot.

        Args:
            current: Formula as it is now.
            snapshot: Earlier saved version.

        Returns:
            FormulaDiff with rows ordered NEW, REMOVED, MODIFIED, UNCHANGED,
            largest weight change first within each status.
        """
        names: dict[str, str] = {}
        current_weights = self._aggregate(current, names)
        previous_weights = self._aggregate(snapshot.formula, names)

        rows = []
        for key in {**current_weights, **previous_weights}:
            in_current = key in current_weights
            in_previous = key in previous_weights
            now = current_weights.get(key, 0.0)
            before = previous_weights.get(key, 0.0)

            if in_current and not in_previous:
                status = DiffStatus.NEW
            elif in_previous and not in_current:
                status = DiffStatus.REMOVED
            elif abs(now - before) > WEIGHT_EPSILON:
                status = DiffStatus.MODIFIED
            else:
                status = DiffStatus.UNCHANGED

            rows.append(DiffRow(key=key, name=names[key], current=now, previous=before, status=status))

        rows.sort(key=lambda r: (-DIFF_STATUS_RANK[r.status], -abs(r.delta)))

        current_shares = self.note_shares(current)
        previous_shares = self.note_shares(snapshot.formula)
        note_summary = [
            NoteShift(note=note, current=current_shares[note], previous=previous_shares[note])
            for note in SUMMARY_NOTES
        ]

        logger.debug("Compared against snapshot %r: %d rows", snapshot.name, len(rows))
        return FormulaDiff(rows=rows, note_summary=note_summary)
