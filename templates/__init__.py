# Templates Package
# Quote PDF generation and styling
from .pdf_generator import PDFGenerator
from .styles import PDFStyles

__all__ = ['PDFGenerator', 'PDFStyles']
