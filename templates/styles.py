from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER

from company_config import get_company_config


class PDFStyles:
    """PDF styling and formatting"""

    def __init__(self):
        self.styles = getSampleStyleSheet()
        config = get_company_config()
        self.brand = colors.HexColor(config["brand_color"])
        self.accent = colors.HexColor(config["accent_color"])

    def get_title_style(self):
        """Get the main title style"""
        return ParagraphStyle(
            'QuoteTitle',
            parent=self.styles['Heading1'],
            fontSize=22,
            spaceAfter=12,
            alignment=TA_CENTER,
            textColor=self.brand
        )

    def get_heading_style(self):
        """Get the section heading style"""
        return ParagraphStyle(
            'QuoteHeading',
            parent=self.styles['Heading2'],
            fontSize=14,
            spaceAfter=10,
            textColor=self.brand
        )

    def get_normal_style(self):
        return self.styles['Normal']

    def get_small_style(self):
        return ParagraphStyle(
            'QuoteSmall',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=colors.HexColor('#6c757d')
        )

    def get_info_table_style(self):
        """Label/value tables (customer, selection, contact)"""
        return [
            ('BACKGROUND', (0, 0), (0, -1), colors.HexColor('#f1f3f5')),
            ('TEXTCOLOR', (0, 0), (0, -1), colors.HexColor('#495057')),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#dee2e6'))
        ]

    def get_pricing_table_style(self):
        """Price breakdown: header row, line items, highlighted total row"""
        return [
            ('BACKGROUND', (0, 0), (-1, 0), self.brand),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('ALIGN', (0, 0), (0, -1), 'LEFT'),
            ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#adb5bd')),
            ('ROWBACKGROUNDS', (0, 1), (-1, -2), [colors.white, colors.HexColor('#f8f9fa')]),
            ('BACKGROUND', (0, -1), (-1, -1), self.accent),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, -1), (-1, -1), 12)
        ]
