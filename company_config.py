#!/usr/bin/env python3
"""
Company Configuration for Quote Documents

Branding and contact details printed on quote PDFs.
Customize these values to match your company's branding.
"""

from datetime import datetime

COMPANY_CONFIG = {
    # Company Details
    "company_name": "Your Aircraft Management Company",  # Replace with your actual company name
    "company_website": "https://yourcompany.com",
    "home_airport": "Centennial Airport (KAPA)",

    # Contact Information
    "sales_email": "members@yourcompany.com",
    "support_phone": "+1 (555) 123-4567",
    "support_hours": "Monday - Friday, 8:00 AM - 6:00 PM MT",

    # Brand colors used by the PDF styles
    "brand_color": "#1E3A5F",
    "accent_color": "#C8A24A",

    # Quote terms
    "quote_valid_days": 30,
    "quote_terms": [
        "Prices are monthly and billed in advance",
        "Hangar fees are billed with your membership when a partner hangar is selected",
        "Usage band is reviewed quarterly against logged flight hours",
        "Negotiated pricing on file for your aircraft supersedes this quote",
    ],

    "footer_copyright": f"© {datetime.now().year} Your Aircraft Management Company. All rights reserved.",
}


def get_company_config():
    """Get the company configuration"""
    return COMPANY_CONFIG


def update_company_config(new_config):
    """Update company configuration with new values"""
    COMPANY_CONFIG.update(new_config)
    return COMPANY_CONFIG


if __name__ == "__main__":
    for key, value in get_company_config().items():
        if isinstance(value, list):
            print(f"{key}:")
            for item in value:
                print(f"  - {item}")
        else:
            print(f"{key}: {value}")
