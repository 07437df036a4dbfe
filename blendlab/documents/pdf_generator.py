"""Batch sheet generation using WeasyPrint."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader

try:
    from weasyprint import HTML, CSS
    WEASYPRINT_AVAILABLE = True
except ImportError:
    WEASYPRINT_AVAILABLE = False

from ..models.report import FormulationReport
from ..services.stats_service import StatsService


logger = logging.getLogger(__name__)


# Template directory
TEMPLATE_DIR = Path(__file__).parent / "templates"


class PDFGenerator:
    """Generate printable batch sheets from formulation reports."""

    def __init__(
        self,
        template_dir: Optional[Path] = None,
        company_name: str = "Artisan Perfume Formulator",
        stats_service: Optional[StatsService] = None,
    ):
        """Initialize the generator.

        Args:
            template_dir: Directory containing Jinja2 templates.
            company_name: Header shown on every sheet.
            stats_service: Used to resolve line densities. Creates one if not provided.
        """
        self.template_dir = template_dir or TEMPLATE_DIR
        self.company_name = company_name
        self.stats_service = stats_service or StatsService()

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=True,
        )

        self.env.filters["format_percent"] = lambda x: f"{x:.2f}%" if x is not None else "N/A"
        self.env.filters["format_grams"] = lambda x: f"{x:.3f}"
        self.env.filters["format_date"] = lambda x: x.strftime("%B %d, %Y %H:%M") if x else ""

    def _render_template(self, template_name: str, context: dict) -> str:
        """Render a Jinja2 template to HTML.

        Args:
            template_name: Name of template file.
            context: Template context variables.

        Returns:
            Rendered HTML string.
        """
        template = self.env.get_template(template_name)
        return template.render(**context)

    def _build_lines(self, report: FormulationReport) -> list[dict]:
        total_weight = report.stats.total_weight
        lines = []
        for item in report.formula:
            density = self.stats_service.resolve_density(item)
            lines.append({
                "name": item.name,
                "cas_number": item.cas_number or "-",
                "note": item.note,
                "weight": item.weight,
                "dilution_percent": item.dilution * 100,
                "density": density,
                "volume": item.weight / density,
                "percent": (item.weight / total_weight * 100) if total_weight > 0 else 0.0,
            })
        return lines

    def render_batch_sheet(
        self,
        report: FormulationReport,
        formula_name: str = "Untitled Formula",
    ) -> str:
        """Render a batch sheet to HTML.

        Args:
            report: Formulation report to print.
            formula_name: Title shown on the sheet.

        Returns:
            Rendered HTML string.
        """
        context = {
            "report": report,
            "formula_name": formula_name,
            "company_name": self.company_name,
            "lines": self._build_lines(report),
            "generated_date": datetime.now(),
            "document_type": "Batch Sheet",
        }
        return self._render_template("batch_sheet.html", context)

    def _write_pdf(self, html_content: str, target: Optional[Path] = None):
        if not WEASYPRINT_AVAILABLE:
            raise ImportError("WeasyPrint is not installed. Run: pip install blend-lab[pdf]")

        css_path = self.template_dir / "styles.css"
        stylesheets = []
        if css_path.exists():
            stylesheets.append(CSS(filename=str(css_path)))

        html = HTML(string=html_content)
        return html.write_pdf(target, stylesheets=stylesheets)

    def generate_batch_sheet(
        self,
        report: FormulationReport,
        output_path: Path,
        formula_name: str = "Untitled Formula",
    ) -> Path:
        """Generate a batch sheet PDF file.

        Args:
            report: Formulation report to print.
            output_path: Output file path.
            formula_name: Title shown on the sheet.

        Returns:
            Path to generated PDF.
        """
        html = self.render_batch_sheet(report, formula_name)
        self._write_pdf(html, output_path)
        logger.info("Wrote batch sheet %s to %s", report.report_number, output_path)
        return output_path

    def generate_batch_sheet_bytes(
        self,
        report: FormulationReport,
        formula_name: str = "Untitled Formula",
    ) -> bytes:
        """Generate a batch sheet PDF in memory."""
        return self._write_pdf(self.render_batch_sheet(report, formula_name))
