from datetime import datetime, timedelta
import io
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.units import inch

from company_config import get_company_config
from pricing_engine.money import format_money
from .styles import PDFStyles


class PDFGenerator:
    """PDF generation for membership quotes"""

    def __init__(self):
        self.styles = PDFStyles()

    def _info_table(self, rows, label_width=2 * inch, value_width=4.5 * inch):
        table = Table(rows, colWidths=[label_width, value_width])
        table.setStyle(TableStyle(self.styles.get_info_table_style()))
        return table

    def build_pricing_rows(self, breakdown, labels=None):
        """Rows for the price breakdown table; the last row is always the total"""
        labels = labels or {}
        rows = [['Item', 'Monthly']]
        rows.append([
            f"{labels.get('tier', breakdown.get('tierId'))} membership",
            format_money(breakdown.get('basePrice', 0)),
        ])
        rows.append([
            f"Usage adjustment ({labels.get('usage_band', breakdown.get('usageBandId'))}, x{breakdown.get('multiplier', 1)})",
            format_money(breakdown.get('usageAdjustedPrice', 0) - breakdown.get('basePrice', 0)),
        ])
        for line in breakdown.get('addOns', []):
            rows.append([f"Add-on: {line.get('name', line.get('id'))}", format_money(line.get('amount', 0))])

        status = breakdown.get('hangarStatus')
        if status == 'selected':
            rows.append([f"Hangar: {labels.get('location', breakdown.get('locationId'))}", format_money(breakdown.get('hangarCost', 0))])
        elif status == 'own_storage':
            rows.append(['Hangar: owner-provided storage', format_money(0)])
        else:
            rows.append(['Hangar: not yet selected', '-'])

        rows.append(['TOTAL PER MONTH', format_money(breakdown.get('total', 0))])
        return rows

    def create_quote_pdf(self, customer, breakdown, selection, snapshot_label=None, labels=None, quote_date=None):
        """Create a membership quote PDF from a saved price breakdown"""
        config = get_company_config()
        quote_date = quote_date or datetime.now()

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=A4, title="Membership Quote")
        story = []

        story.append(Paragraph("MEMBERSHIP QUOTE", self.styles.get_title_style()))
        story.append(Paragraph(f"{config['company_name']} · {config['home_airport']}", self.styles.get_normal_style()))
        story.append(Spacer(1, 18))

        story.append(Paragraph("Customer", self.styles.get_heading_style()))
        story.append(self._info_table([
            ['Name:', customer.get('name', 'N/A')],
            ['Email:', customer.get('email', 'N/A')],
            ['Phone:', customer.get('phone', 'N/A')],
            ['Aircraft:', customer.get('aircraft', 'N/A')],
        ]))
        story.append(Spacer(1, 18))

        labels = labels or {}
        addon_names = [line.get('name', line.get('id')) for line in breakdown.get('addOns', [])]
        story.append(Paragraph("Selection", self.styles.get_heading_style()))
        story.append(self._info_table([
            ['Quote Date:', quote_date.strftime('%B %d, %Y')],
            ['Valid Until:', (quote_date + timedelta(days=config['quote_valid_days'])).strftime('%B %d, %Y')],
            ['Tier:', labels.get('tier', selection.get('tier_id', 'N/A'))],
            ['Monthly Flight Hours:', labels.get('usage_band', selection.get('usage_band_id', 'N/A'))],
            ['Add-ons:', ', '.join(addon_names) if addon_names else 'None'],
            ['Price List:', snapshot_label or 'Current'],
        ]))
        story.append(Spacer(1, 18))

        story.append(Paragraph("Pricing Breakdown", self.styles.get_heading_style()))
        pricing_table = Table(self.build_pricing_rows(breakdown, labels), colWidths=[4.5 * inch, 2 * inch])
        pricing_table.setStyle(TableStyle(self.styles.get_pricing_table_style()))
        story.append(pricing_table)
        story.append(Spacer(1, 18))

        story.append(Paragraph("Terms", self.styles.get_heading_style()))
        for term in [f"This quote is valid for {config['quote_valid_days']} days from the date of issue"] + config['quote_terms']:
            story.append(Paragraph(f"• {term}", self.styles.get_normal_style()))
            story.append(Spacer(1, 4))
        story.append(Spacer(1, 18))

        story.append(Paragraph("Contact", self.styles.get_heading_style()))
        story.append(self._info_table([
            ['Email:', config['sales_email']],
            ['Phone:', config['support_phone']],
            ['Hours:', config['support_hours']],
            ['Website:', config['company_website']],
        ], label_width=1 * inch, value_width=5.5 * inch))
        story.append(Spacer(1, 12))
        story.append(Paragraph(config['footer_copyright'], self.styles.get_small_style()))

        doc.build(story)
        buffer.seek(0)
        return buffer
