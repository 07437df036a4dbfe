"""Document generation for batch sheets."""

from .pdf_generator import PDFGenerator

__all__ = ["PDFGenerator"]
