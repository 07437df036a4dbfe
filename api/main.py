"""FastAPI application for the formulation analysis API."""

from datetime import datetime
from typing import Any, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel, Field

from blendlab import __version__
from blendlab.config import configure_logging, get_settings
from blendlab.documents.pdf_generator import PDFGenerator
from blendlab.models.formula import FormulaItem
from blendlab.models.history import Snapshot
from blendlab.models.regulatory import IFRA_CATEGORIES, PRODUCT_TO_IFRA_CATEGORY, ProductType
from blendlab.services.batch_service import BatchAdjustmentError, BatchService
from blendlab.services.engine import FormulationEngine
from blendlab.services.history_service import HistoryService
from blendlab.services.template_service import TemplateError, TemplateService


settings = get_settings()
configure_logging()

app = FastAPI(
    title=settings.app_name,
    description="Fragrance formulation statistics, solvent analysis and IFRA compliance API",
    version=__version__,
)

# Initialize services
engine = FormulationEngine()
batch_service = BatchService(engine.repository)
template_service = TemplateService()
history_service = HistoryService()
pdf_generator = PDFGenerator(company_name=settings.company_name, stats_service=engine.stats_service)


# Request/Response Models
class FormulaItemInput(BaseModel):
    """Input model for a formula line."""
    name: str
    weight: float = Field(ge=0)
    dilution: float = Field(default=1.0, gt=0, le=1)
    ingredient_id: Optional[str] = None
    cas_number: str = ""
    family: str = ""
    note: str = ""
    solvent: str = "None"
    cost_per_kg: float = Field(default=0.0, ge=0)
    custom_density: Optional[float] = None
    accord_id: Optional[str] = None
    supplier: str = ""
    odor_profile: str = ""
    uuid: Optional[str] = None


class FormulaInput(BaseModel):
    """Input model for a formula."""
    name: str = "Untitled Formula"
    items: list[FormulaItemInput] = []


class FormulaRequest(BaseModel):
    """Request model for stats and solvent analysis."""
    formula: FormulaInput


class AnalysisRequest(BaseModel):
    """Request model for compliance and full analysis."""
    formula: FormulaInput
    category: Optional[str] = None
    product_type: Optional[str] = None
    total_batch_weight: Optional[float] = Field(default=None, ge=0)


class ScaleRequest(BaseModel):
    """Request model for batch scaling."""
    formula: FormulaInput
    target_weight: float
    mode: Literal["total", "ingredient", "accord"] = "total"
    ingredient_id: Optional[str] = None
    accord_id: Optional[str] = None


class ConcentrationRequest(BaseModel):
    """Request model for concentration adjustment."""
    formula: FormulaInput
    target_percent: float
    solvent_name: str = "Ethanol"


class TemplateCaptureRequest(BaseModel):
    """Request model for saving an accord template."""
    name: str
    items: list[FormulaItemInput]
    target_weight: Optional[float] = None


class TemplateImportRequest(BaseModel):
    """Request model for importing accord templates."""
    payload: Any


class SnapshotInput(BaseModel):
    """Input model for a saved formula version."""
    name: str
    items: list[FormulaItemInput] = []
    note: str = ""


class HistoryDiffRequest(BaseModel):
    """Request model for version comparison."""
    current: FormulaInput
    snapshot: SnapshotInput


class BatchSheetRequest(BaseModel):
    """Request model for batch sheet generation."""
    formula: FormulaInput
    category: Optional[str] = None
    product_type: Optional[str] = None
    format: Literal["html", "pdf"] = "html"


# Helper functions
def _to_items(items: list[FormulaItemInput]) -> list[FormulaItem]:
    """Convert input lines to FormulaItems."""
    return [FormulaItem.from_dict(item.model_dump(exclude_none=True)) for item in items]


def _resolve_category(category: Optional[str], product_type: Optional[str]) -> str:
    """Pick the IFRA category from an explicit code, a product type, or the default."""
    category = (category or "").strip()
    if category:
        return category.upper()
    if product_type:
        try:
            return PRODUCT_TO_IFRA_CATEGORY[ProductType(product_type.lower())]
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid product type: {product_type}")
    return settings.default_category


# Endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "description": "Fragrance formulation analysis API",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@app.post("/api/stats")
async def compute_stats(request: FormulaRequest):
    """Compute batch totals with solvent analysis."""
    formula = _to_items(request.formula.items)
    stats = engine.compute_stats(formula)
    result = stats.to_dict()
    result["notes"] = engine.stats_service.note_breakdown(formula, stats.total_weight).to_dict()
    return result


@app.post("/api/solvents")
async def analyze_solvents(request: FormulaRequest):
    """Break down the solvent system and estimate the flash point."""
    return engine.analyze_solvents(_to_items(request.formula.items)).to_dict()


@app.post("/api/compliance")
async def check_compliance(request: AnalysisRequest):
    """Check IFRA compliance for one category."""
    formula = _to_items(request.formula.items)
    category = _resolve_category(request.category, request.product_type)
    total_batch_weight = request.total_batch_weight
    if total_batch_weight is None:
        total_batch_weight = sum(item.weight for item in formula)

    report = engine.ifra_service.build_report(formula, total_batch_weight, category)
    return report.to_dict()


@app.post("/api/analyze")
async def analyze(request: AnalysisRequest):
    """Run the full formulation analysis."""
    formula = _to_items(request.formula.items)
    category = _resolve_category(request.category, request.product_type)
    return engine.analyze(formula, category).to_dict()


@app.post("/api/batch/scale")
async def scale_batch(request: ScaleRequest):
    """Scale a formula, one ingredient, or one accord to a target weight."""
    formula = _to_items(request.formula.items)
    try:
        if request.mode == "ingredient":
            if not request.ingredient_id:
                raise BatchAdjustmentError("ingredient_id is required for ingredient scaling")
            scaled = batch_service.scale_to_ingredient(formula, request.ingredient_id, request.target_weight)
        elif request.mode == "accord":
            if not request.accord_id:
                raise BatchAdjustmentError("accord_id is required for accord scaling")
            scaled = batch_service.scale_accord(formula, request.accord_id, request.target_weight)
        else:
            scaled = batch_service.scale_to_total(formula, request.target_weight)
    except BatchAdjustmentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"items": [item.to_dict() for item in scaled]}


@app.post("/api/batch/concentration")
async def adjust_concentration(request: ConcentrationRequest):
    """Top up solvent so active material reaches the target percentage."""
    formula = _to_items(request.formula.items)
    try:
        adjusted = batch_service.adjust_concentration(formula, request.target_percent, request.solvent_name)
    except BatchAdjustmentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "items": [item.to_dict() for item in adjusted],
        "aromatic_percent": batch_service.aromatic_percent(adjusted),
    }


@app.post("/api/templates/capture")
async def capture_template(request: TemplateCaptureRequest):
    """Save lines as an accord template, optionally inserting it at a weight."""
    try:
        template = template_service.capture(request.name, _to_items(request.items))
        result = {"template": template.to_dict()}
        if request.target_weight is not None:
            group, items = template_service.instantiate(template, request.target_weight)
            result["accord"] = group.to_dict()
            result["items"] = [item.to_dict() for item in items]
    except TemplateError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result


@app.post("/api/templates/import")
async def import_templates(request: TemplateImportRequest):
    """Validate accord templates from an exported JSON payload."""
    try:
        result = template_service.parse_import(request.payload)
    except TemplateError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result.to_dict()


@app.post("/api/history/diff")
async def diff_history(request: HistoryDiffRequest):
    """Compare the current formula with a snapshot."""
    snapshot = Snapshot(
        name=request.snapshot.name,
        formula=_to_items(request.snapshot.items),
        note=request.snapshot.note,
    )
    return history_service.diff(_to_items(request.current.items), snapshot).to_dict()


@app.post("/api/documents/batch-sheet")
async def generate_batch_sheet(request: BatchSheetRequest):
    """Generate a printable batch sheet as HTML or PDF."""
    formula = _to_items(request.formula.items)
    category = _resolve_category(request.category, request.product_type)
    report = engine.analyze(formula, category)

    if request.format == "html":
        return HTMLResponse(pdf_generator.render_batch_sheet(report, request.formula.name))

    try:
        pdf_bytes = pdf_generator.generate_batch_sheet_bytes(report, request.formula.name)
    except ImportError as e:
        raise HTTPException(status_code=501, detail=str(e))

    filename = f"Batch_Sheet_{request.formula.name}_{datetime.now().strftime('%Y%m%d')}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# Reference data endpoints
@app.get("/api/reference/categories")
async def get_categories():
    """Get list of IFRA categories."""
    return [{"code": code, "label": label} for code, label in IFRA_CATEGORIES.items()]


@app.get("/api/reference/product-types")
async def get_product_types():
    """Get list of supported product types."""
    return [
        {"value": pt.value, "name": pt.name, "ifra_category": PRODUCT_TO_IFRA_CATEGORY[pt]}
        for pt in ProductType
    ]


@app.get("/api/reference/ingredients")
async def list_ingredients(q: Optional[str] = None, limit: int = 20):
    """Search master ingredients, or list them all without a query."""
    if q:
        ingredients = engine.repository.search_ingredients(q, limit=limit)
    else:
        ingredients = engine.repository.get_all_ingredients()
    return [i.to_dict() for i in ingredients]


@app.get("/api/reference/ingredients/{ingredient_id}")
async def get_ingredient(ingredient_id: str):
    """Get one master ingredient with its constituent profile."""
    ingredient = engine.repository.get_ingredient(ingredient_id)
    if not ingredient:
        raise HTTPException(status_code=404, detail=f"Unknown ingredient: {ingredient_id}")

    profile = engine.naturals_service.get_profile(ingredient_id)
    result = ingredient.to_dict()
    result["constituents"] = profile.to_dict()["constituents"] if profile else []
    return result


@app.get("/api/reference/limits/{cas_number}")
async def get_limits(cas_number: str):
    """Get the limit entry and per-category limits for a CAS number."""
    entry = engine.repository.get_limit_entry(cas_number)
    if not entry:
        raise HTTPException(status_code=404, detail=f"No limit entry for CAS {cas_number}")

    result = entry.to_dict()
    result["category_limits"] = engine.ifra_service.get_category_limits(cas_number)
    result["natural_sources"] = [
        {"ingredient_id": profile.ingredient_id, "fraction": fraction}
        for profile, fraction in engine.naturals_service.get_constituent_sources(cas_number)
    ]
    return result


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
