"""Tests for accord templates."""

import pytest

from blendlab.models.formula import FormulaItem
from blendlab.models.template import AccordTemplate, AccordTemplateItem
from blendlab.services.template_service import TemplateError, TemplateService


@pytest.fixture
def service():
    """Create template service."""
    return TemplateService()


@pytest.fixture
def rose_accord():
    """Three-line rose accord."""
    return [
        FormulaItem(name="Phenylethyl Alcohol", weight=6.0, cas_number="60-12-8", note="Middle"),
        FormulaItem(name="Citronellol", weight=3.0, cas_number="106-22-9", note="Middle"),
        FormulaItem(name="Rose Oxide", weight=1.0, dilution=0.1, solvent="DPG", note="Top"),
    ]


class TestCapture:
    """Tests for capturing templates."""

    def test_ratios(self, service, rose_accord):
        """Test ratios are weight shares of the accord."""
        template = service.capture("Rose Base", rose_accord)
        assert template.name == "Rose Base"
        assert [i.ratio for i in template.items] == pytest.approx([0.6, 0.3, 0.1])
        assert template.items[2].dilution == 0.1
        assert template.items[2].solvent == "DPG"

    def test_blank_name(self, service, rose_accord):
        """Test blank names are rejected."""
        with pytest.raises(TemplateError):
            service.capture("   ", rose_accord)

    def test_zero_weight(self, service):
        """Test zero-weight accords are rejected."""
        with pytest.raises(TemplateError):
            service.capture("Empty", [FormulaItem(name="A", weight=0.0)])


class TestInstantiate:
    """Tests for inserting templates."""

    def test_weights_and_group(self, service, rose_accord):
        """Test inserted lines share a new accord group."""
        template = service.capture("Rose Base", rose_accord)
        group, items = service.instantiate(template, 50.0)

        assert group.name == "Rose Base"
        assert [i.weight for i in items] == pytest.approx([30.0, 15.0, 5.0])
        assert all(i.accord_id == group.id for i in items)

    def test_fresh_uuids(self, service, rose_accord):
        """Test each insertion gets new line ids."""
        template = service.capture("Rose Base", rose_accord)
        _, first = service.instantiate(template, 10.0)
        _, second = service.instantiate(template, 10.0)
        assert {i.uuid for i in first}.isdisjoint({i.uuid for i in second})

    def test_rejects_non_positive_weight(self, service, rose_accord):
        """Test target weight must be positive."""
        template = service.capture("Rose Base", rose_accord)
        with pytest.raises(TemplateError):
            service.instantiate(template, 0.0)


class TestParseImport:
    """Tests for template import validation."""

    def test_wrapped_payload(self, service):
        """Test the exported {"templates": [...]} shape."""
        payload = {"templates": [{"name": "Amber", "items": [{"name": "Labdanum", "ratio": 1.0}]}]}
        result = service.parse_import(payload)

        assert len(result.templates) == 1
        item = result.templates[0].items[0]
        assert item.family == "Custom"
        assert item.note == "Middle"
        assert item.dilution == 1.0
        assert item.solvent == "None"
        assert item.cost_per_kg == 0.0

    def test_list_payload(self, service):
        """Test a bare list of templates."""
        result = service.parse_import([{"name": "Amber", "items": [{"name": "Vanillin", "ratio": 0.5}]}])
        assert len(result.templates) == 1

    def test_skips_invalid_templates(self, service):
        """Test templates without a name or items list are skipped."""
        payload = [
            {"name": "", "items": [{"name": "A", "ratio": 1}]},
            {"name": "No Items"},
            {"name": "Bad Items", "items": "A"},
            "not a template",
            {"name": "Good", "items": [{"name": "A", "ratio": 1}]},
        ]
        result = service.parse_import(payload)
        assert [t.name for t in result.templates] == ["Good"]
        assert result.skipped_templates == 4

    def test_skips_invalid_items(self, service):
        """Test items without a name or with a bad ratio are skipped."""
        payload = [{
            "name": "Citrus",
            "items": [
                {"name": "Lemon", "ratio": 0.5},
                {"ratio": 0.2},
                {"name": "Lime", "ratio": 0},
                {"name": "Yuzu", "ratio": "lots"},
                {"name": "Orange", "ratio": -1},
                {"name": "Mandarin", "ratio": 0.5},
            ],
        }]
        result = service.parse_import(payload)
        assert [i.name for i in result.templates[0].items] == ["Lemon", "Mandarin"]
        assert result.skipped_items == 4

    def test_template_without_valid_items_dropped(self, service):
        """Test templates left empty after validation are dropped."""
        result = service.parse_import([{"name": "Ghost", "items": [{"name": "A", "ratio": 0}]}])
        assert result.templates == []
        assert result.skipped_templates == 1
        assert result.skipped_items == 1

    def test_renormalises_ratios(self, service):
        """Test ratios are rescaled to sum to one."""
        payload = [{"name": "Woods", "items": [{"name": "Cedar", "ratio": 3}, {"name": "Vetiver", "ratio": 1}]}]
        items = service.parse_import(payload).templates[0].items
        assert [i.ratio for i in items] == pytest.approx([0.75, 0.25])

    def test_keeps_ratios_within_tolerance(self, service):
        """Test near-unit sums are left alone."""
        payload = [{"name": "Woods", "items": [{"name": "Cedar", "ratio": 0.50004}, {"name": "Vetiver", "ratio": 0.5}]}]
        items = service.parse_import(payload).templates[0].items
        assert items[0].ratio == 0.50004

    def test_summary(self, service):
        """Test the human-readable summary."""
        result = service.parse_import([{"name": "X", "items": [{"name": "A", "ratio": 1}, {"name": "B"}]}])
        assert result.summary == "Imported 1 templates. Skipped 1 invalid items."

    def test_invalid_shape(self, service):
        """Test payloads that are neither list nor wrapper are rejected."""
        with pytest.raises(TemplateError):
            service.parse_import({"name": "Amber"})
        with pytest.raises(TemplateError):
            service.parse_import("templates")


class TestMerge:
    """Tests for merging imported templates."""

    def test_reassigns_duplicate_ids(self, service):
        """Test clashing ids get fresh ones."""
        existing = [AccordTemplate(name="Rose", items=[AccordTemplateItem(ratio=1.0, name="PEA")], id="t1")]
        incoming = [
            AccordTemplate(name="Rose Copy", items=[AccordTemplateItem(ratio=1.0, name="PEA")], id="t1"),
            AccordTemplate(name="Iris", items=[AccordTemplateItem(ratio=1.0, name="Orris")], id=""),
            AccordTemplate(name="Musk", items=[AccordTemplateItem(ratio=1.0, name="Habanolide")], id="t2"),
        ]
        merged = service.merge(existing, incoming)

        ids = [t.id for t in merged]
        assert len(merged) == 4
        assert len(set(ids)) == 4
        assert ids[0] == "t1"
        assert ids[3] == "t2"
        assert all(ids)

    def test_does_not_mutate_incoming(self, service):
        """Test re-keyed templates are copies."""
        existing = [AccordTemplate(name="Rose", items=[AccordTemplateItem(ratio=1.0, name="PEA")], id="t1")]
        clash = AccordTemplate(name="Rose Copy", items=[AccordTemplateItem(ratio=1.0, name="PEA")], id="t1")
        merged = service.merge(existing, [clash])

        assert clash.id == "t1"
        assert merged[1].id != "t1"
        assert merged[1].name == "Rose Copy"
