"""Tests for the solvent analyzer and flash point estimator."""

import pytest

from blendlab.models.formula import FormulaItem
from blendlab.models.solvent import FlammabilityRating
from blendlab.services.solvent_service import (
    SolventService,
    estimate_flash_point,
    normalize_solvent_name,
    solvent_density,
)


@pytest.fixture
def service():
    """Create solvent service."""
    return SolventService()


@pytest.fixture
def eau_de_parfum():
    """Formula with diluted materials and neat solvent lines."""
    return [
        FormulaItem(name="Bergamot Oil", weight=15.0, note="Top", cas_number="8007-75-8"),
        FormulaItem(name="Rose Otto", weight=10.0, dilution=0.1, solvent="Ethanol", note="Middle"),
        FormulaItem(name="Isoeugenol", weight=2.0, dilution=0.1, solvent="DPG", note="Middle"),
        FormulaItem(name="Perfumer's Alcohol", weight=70.0, family="Solvent", note="Solvent"),
        FormulaItem(name="DPG", weight=3.0, family="Solvent", note="Solvent"),
    ]


class TestNormalizeSolventName:
    """Tests for carrier name normalization."""

    def test_ethanol_synonyms(self):
        """Test alcohol and ethanol names map to Ethanol."""
        assert normalize_solvent_name("Ethanol 96%") == "Ethanol"
        assert normalize_solvent_name("Perfumer's Alcohol") == "Ethanol"

    def test_abbreviations(self):
        """Test common solvent abbreviations."""
        assert normalize_solvent_name("DPG (Dipropylene Glycol)") == "DPG"
        assert normalize_solvent_name("ipm") == "IPM"
        assert normalize_solvent_name("TEC") == "TEC"
        assert normalize_solvent_name("Water (Aqua)") == "Water"
        assert normalize_solvent_name("Benzyl Benzoate") == "BB"

    def test_custom_name_kept(self):
        """Test unknown carriers keep their literal name."""
        assert normalize_solvent_name("Fractionated Coconut Oil") == "Fractionated Coconut Oil"

    def test_unknown_density_defaults_to_one(self):
        """Test unknown carriers use density 1.0."""
        assert solvent_density("Fractionated Coconut Oil") == 1.0
        assert solvent_density("Ethanol") == 0.789


class TestFlashPoint:
    """Tests for flash point interpolation and rating."""

    def test_no_ethanol_is_safe(self):
        """Test zero ethanol returns no temperature."""
        estimate = estimate_flash_point(0.0)
        assert estimate.celsius is None
        assert estimate.rating == FlammabilityRating.SAFE
        assert estimate.warning == "Non-flammable solvent basis"

    def test_seventy_percent(self):
        """Test 70% v/v hits the 21 °C control point exactly."""
        estimate = estimate_flash_point(70.0)
        assert estimate.celsius == pytest.approx(21.0)
        assert estimate.rating == FlammabilityRating.HIGH

    def test_interpolates_between_points(self):
        """Test linear interpolation between control points."""
        estimate = estimate_flash_point(25.0)
        assert estimate.celsius == pytest.approx(32.5)
        assert estimate.rating == FlammabilityRating.FLAMMABLE

    def test_boundary_23_is_flammable(self):
        """Test 23 °C falls in the Flammable band, not High."""
        estimate = estimate_flash_point(55.0)
        assert estimate.celsius == pytest.approx(23.0)
        assert estimate.rating == FlammabilityRating.FLAMMABLE

    def test_low_flammability(self):
        """Test small ethanol shares rate Low."""
        estimate = estimate_flash_point(5.0)
        assert estimate.celsius == pytest.approx(62.0)
        assert estimate.rating == FlammabilityRating.LOW

    def test_pure_ethanol(self):
        """Test 100% ethanol is 13 °C."""
        assert estimate_flash_point(100.0).celsius == pytest.approx(13.0)

    def test_estimate_is_flagged(self):
        """Test estimates are always labeled as estimates."""
        assert estimate_flash_point(40.0).is_estimate is True

    def test_monotonic_along_curve(self):
        """Test more ethanol never raises the flash point."""
        temps = [estimate_flash_point(p).celsius for p in range(1, 101)]
        assert all(a >= b for a, b in zip(temps, temps[1:]))


class TestSolventAnalysis:
    """Tests for solvent breakdown."""

    def test_empty_formula(self, service):
        """Test empty formula has no solvent."""
        analysis = service.analyze([])
        assert analysis.breakdown == []
        assert analysis.total_solvent_mass == 0.0
        assert analysis.ethanol_vv_pct == 0.0
        assert analysis.flash_point.rating == FlammabilityRating.SAFE

    def test_breakdown_pools_carriers(self, service, eau_de_parfum):
        """Test diluted carriers and neat lines are pooled per name."""
        analysis = service.analyze(eau_de_parfum)

        ethanol = analysis.get_entry("Ethanol")
        dpg = analysis.get_entry("DPG")
        assert ethanol.mass == pytest.approx(70.0 + 9.0)
        assert dpg.mass == pytest.approx(3.0 + 1.8)
        assert analysis.get_entry("Bergamot Oil") is None
        assert analysis.total_solvent_mass == pytest.approx(83.8)

    def test_sorted_by_mass(self, service, eau_de_parfum):
        """Test rows are sorted by descending mass."""
        analysis = service.analyze(eau_de_parfum)
        assert [e.name for e in analysis.breakdown] == ["Ethanol", "DPG"]

    def test_percentages_sum_to_100(self, service, eau_de_parfum):
        """Test mass and volume percentages each sum to 100."""
        analysis = service.analyze(eau_de_parfum)
        assert sum(e.mass_pct for e in analysis.breakdown) == pytest.approx(100.0)
        assert sum(e.vol_pct for e in analysis.breakdown) == pytest.approx(100.0)

    def test_ethanol_volume_fraction(self, service, eau_de_parfum):
        """Test ethanol v/v is relative to total solvent volume."""
        analysis = service.analyze(eau_de_parfum)
        ethanol_volume = 79.0 / 0.789
        dpg_volume = 4.8 / 1.02
        expected = ethanol_volume / (ethanol_volume + dpg_volume) * 100
        assert analysis.ethanol_vv_pct == pytest.approx(expected)
        assert analysis.flash_point.rating == FlammabilityRating.HIGH

    def test_missing_solvent_defaults_to_ethanol(self, service):
        """Test diluted lines without a named carrier use Ethanol."""
        formula = [
            FormulaItem(name="Oakmoss", weight=10.0, dilution=0.5, solvent="None"),
            FormulaItem(name="Civet", weight=10.0, dilution=0.5, solvent=""),
        ]
        analysis = service.analyze(formula)
        assert len(analysis.breakdown) == 1
        assert analysis.breakdown[0].name == "Ethanol"
        assert analysis.breakdown[0].mass == pytest.approx(10.0)

    def test_custom_carrier(self, service):
        """Test unknown carriers are their own row with density 1.0."""
        formula = [FormulaItem(name="Ambrette", weight=10.0, dilution=0.2, solvent="Coconut Oil")]
        analysis = service.analyze(formula)
        entry = analysis.get_entry("Coconut Oil")
        assert entry.mass == pytest.approx(8.0)
        assert entry.volume == pytest.approx(8.0)
        assert analysis.ethanol_vv_pct == 0.0

    def test_diluted_solvent_line_uses_carrier_branch(self, service):
        """Test a diluted line tagged Solvent only counts its carrier part."""
        formula = [
            FormulaItem(name="DPG Blend", weight=10.0, dilution=0.5, solvent="Ethanol", family="Solvent"),
        ]
        analysis = service.analyze(formula)
        assert [e.name for e in analysis.breakdown] == ["Ethanol"]
        assert analysis.total_solvent_mass == pytest.approx(5.0)

    def test_neat_aromatic_not_counted(self, service):
        """Test neat non-solvent lines contribute nothing."""
        formula = [FormulaItem(name="Iso E Super", weight=20.0, note="Base")]
        assert service.analyze(formula).total_solvent_mass == 0.0
