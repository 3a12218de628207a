"""Output generation for week schedules (text grid, PDF)."""

from shiftgrid.output.pdf_generator import PDFGenerator
from shiftgrid.output.text_generator import GridTextGenerator

__all__ = [
    "GridTextGenerator",
    "PDFGenerator",
]
