"""Tests for version comparison."""

import pytest

from blendlab.models.formula import FormulaItem
from blendlab.models.history import DiffStatus, Snapshot
from blendlab.services.history_service import HistoryService


@pytest.fixture
def service():
    """Create history service."""
    return HistoryService()


@pytest.fixture
def snapshot():
    """Version 1 of a fougere."""
    return Snapshot(
        name="v1",
        formula=[
            FormulaItem(name="Lavender Oil", ingredient_id="lavender_oil", weight=30.0, note="Middle"),
            FormulaItem(name="Coumarin", cas_number="91-64-5", weight=10.0, note="Base"),
            FormulaItem(name="Oakmoss", weight=5.0, note="Base"),
            FormulaItem(name="Bergamot", ingredient_id="bergamot_oil", weight=15.0, note="Top"),
        ],
    )


@pytest.fixture
def current():
    """Version 2 of the same fougere."""
    return [
        FormulaItem(name="Lavender Oil", ingredient_id="lavender_oil", weight=30.0, note="Middle"),
        FormulaItem(name="Coumarin", cas_number="91-64-5", weight=12.0, note="Base"),
        FormulaItem(name="Bergamot", ingredient_id="bergamot_oil", weight=5.0, note="Top"),
        FormulaItem(name="Geranium", weight=3.0, note="Heart"),
    ]


class TestStableKey:
    """Tests for line identity across versions."""

    def test_ingredient_id(self, service):
        """Test linked lines use their ingredient id."""
        item = FormulaItem(name="Lavender", ingredient_id="lavender_oil", cas_number="8000-28-0")
        assert service.stable_key(item) == "lavender_oil"

    def test_cas(self, service):
        """Test custom lines with a CAS use it."""
        assert service.stable_key(FormulaItem(name="Coumarin", cas_number=" 91-64-5 ")) == "cas:91-64-5"

    def test_short_cas_falls_back_to_name(self, service):
        """Test CAS values of 4 characters or fewer are ignored."""
        assert service.stable_key(FormulaItem(name="My Base", cas_number="N/A")) == "name:my base"

    def test_name_is_trimmed(self, service):
        """Test names differing only by surrounding whitespace share a key."""
        assert service.stable_key(FormulaItem(name=" Iso E Super ")) == "name:iso e super"


class TestDiff:
    """Tests for formula comparison."""

    def test_statuses(self, service, current, snapshot):
        """Test each key is classified."""
        diff = service.diff(current, snapshot)
        statuses = {row.key: row.status for row in diff.rows}

        assert statuses["lavender_oil"] == DiffStatus.UNCHANGED
        assert statuses["cas:91-64-5"] == DiffStatus.MODIFIED
        assert statuses["bergamot_oil"] == DiffStatus.MODIFIED
        assert statuses["name:oakmoss"] == DiffStatus.REMOVED
        assert statuses["name:geranium"] == DiffStatus.NEW

    def test_ordering(self, service, current, snapshot):
        """Test rows sort by status, then by size of change."""
        diff = service.diff(current, snapshot)
        assert [row.key for row in diff.rows] == [
            "name:geranium",
            "name:oakmoss",
            "bergamot_oil",
            "cas:91-64-5",
            "lavender_oil",
        ]

    def test_deltas(self, service, current, snapshot):
        """Test weight deltas."""
        diff = service.diff(current, snapshot)
        rows = {row.key: row for row in diff.rows}
        assert rows["bergamot_oil"].delta == pytest.approx(-10.0)
        assert rows["name:oakmoss"].current == 0.0
        assert rows["name:oakmoss"].previous == 5.0

    def test_counts(self, service, current, snapshot):
        """Test status counts."""
        diff = service.diff(current, snapshot)
        assert diff.count(DiffStatus.NEW) == 1
        assert diff.count(DiffStatus.REMOVED) == 1
        assert diff.count(DiffStatus.MODIFIED) == 2
        assert diff.count(DiffStatus.UNCHANGED) == 1
        assert len(diff.changed_rows) == 4
        assert diff.to_dict()["counts"]["MODIFIED"] == 2

    def test_duplicate_lines_aggregate(self, service):
        """Test lines sharing a key are summed before comparing."""
        snapshot = Snapshot(name="v1", formula=[FormulaItem(name="Iso E Super", weight=10.0)])
        current = [FormulaItem(name="Iso E Super", weight=4.0), FormulaItem(name="iso e super", weight=6.0)]
        diff = service.diff(current, snapshot)
        assert len(diff.rows) == 1
        assert diff.rows[0].status == DiffStatus.UNCHANGED

    def test_padded_name_matches_snapshot(self, service):
        """Test a trailing space in a name does not split the line in two."""
        snapshot = Snapshot(name="v1", formula=[FormulaItem(name="Iso E Super", weight=10.0)])
        diff = service.diff([FormulaItem(name="Iso E Super ", weight=10.0)], snapshot)
        assert [row.status for row in diff.rows] == [DiffStatus.UNCHANGED]

    def test_tiny_change_is_unchanged(self, service):
        """Test sub-microgram changes are ignored."""
        snapshot = Snapshot(name="v1", formula=[FormulaItem(name="Ambroxan", weight=1.0)])
        diff = service.diff([FormulaItem(name="Ambroxan", weight=1.0000001)], snapshot)
        assert diff.rows[0].status == DiffStatus.UNCHANGED

    def test_note_summary(self, service, current, snapshot):
        """Test note shares are percentages of total weight."""
        diff = service.diff(current, snapshot)
        notes = {shift.note: shift for shift in diff.note_summary}

        assert [s.note for s in diff.note_summary] == ["Top", "Middle", "Base"]
        assert notes["Top"].current == pytest.approx(10.0)
        assert notes["Top"].previous == pytest.approx(25.0)
        assert notes["Middle"].current == pytest.approx(66.0)
        assert notes["Base"].previous == pytest.approx(25.0)

    def test_heart_variants_count_as_middle(self, service):
        """Test any note mentioning heart lands in Middle."""
        formula = [
            FormulaItem(name="Geranium", weight=10.0, note="Heart Note"),
            FormulaItem(name="Rose", weight=10.0, note="Middle/Heart"),
        ]
        shares = service.note_shares(formula)
        assert shares["Middle"] == pytest.approx(100.0)
        assert shares["Top"] == 0.0

    def test_empty_versions(self, service):
        """Test comparing two empty formulas."""
        diff = service.diff([], Snapshot(name="empty"))
        assert diff.rows == []
        assert all(s.current == 0.0 and s.previous == 0.0 for s in diff.note_summary)
