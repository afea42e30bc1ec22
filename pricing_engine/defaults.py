# Default catalog used to seed a fresh database

CORE_FEATURES = [
    {"name": "Pre & post-flight preparation", "description": "Aircraft readiness checks and walkarounds", "included": True},
    {"name": "Professional cleaning & detailing", "description": "Interior and exterior, scaled by usage", "included": True},
    {"name": "Fluid top-offs & replenishment", "description": "Oil, oxygen, TKS (as applicable)", "included": True},
    {"name": "Avionics database updates", "description": "Always current navigation data", "included": True},
    {"name": "Digital owner portal access", "description": "Real-time logs, photos, and notifications", "included": True},
    {"name": "Maintenance coordination", "description": "Scheduling, tracking, and vendor management", "included": True},
]

DEFAULT_TIERS = [
    {
        "id": "light",
        "name": "Light Aircraft",
        "base_monthly": 850,
        "description": "For light piston single-engine aircraft",
        "features": CORE_FEATURES + [
            {"name": "Advanced avionics support", "description": "G1000/Perspective systems", "included": False},
        ],
        "examples": ["C172", "C182", "Archer", "Cherokee", "Skyhawk"],
        "sort_order": 1,
        "active": True,
        "labor_hours": 4,
        "consumables": 10,
    },
    {
        "id": "performance",
        "name": "High Performance",
        "base_monthly": 1650,
        "description": "For high-performance and technologically advanced aircraft",
        "features": CORE_FEATURES + [
            {"name": "Advanced avionics support", "description": "G1000/Perspective systems", "included": True},
            {"name": "Turbo system monitoring", "description": "For turbocharged models", "included": True},
        ],
        "examples": ["SR20", "SR22", "SR22T", "DA40", "Mooney", "Bonanza"],
        "match_patterns": ["cirrus", "diamond", "da42", "da62", "baron", "ttx", "columbia", "corvalis"],
        "sort_order": 2,
        "active": True,
        "labor_hours": 6,
        "consumables": 25,
    },
    {
        "id": "turbine",
        "name": "Turbine",
        "base_monthly": 3200,
        "description": "For turbine singles and light jets",
        "features": CORE_FEATURES + [
            {"name": "Turbine engine monitoring", "description": "ITT, torque tracking", "included": True},
            {"name": "Jet-specific detailing", "description": "Specialized cleaning products", "included": True},
        ],
        "examples": ["TBM", "Vision Jet", "PC-12", "Meridian"],
        "match_patterns": ["vision", "jet", "pilatus", "mustang", "citation", "phenom", "eclipse"],
        "sort_order": 3,
        "active": True,
        "labor_hours": 10,
        "avionics_db": 60,
        "consumables": 40,
    },
]

DEFAULT_USAGE_BANDS = [
    {"id": "0-20", "label": "0-20 hrs/mo", "min_hours": 0, "max_hours": 20, "multiplier": 1.0, "avg_hours": 10},
    {"id": "20-50", "label": "20-50 hrs/mo", "min_hours": 20, "max_hours": 50, "multiplier": 1.45, "avg_hours": 35},
    {"id": "50+", "label": "50+ hrs/mo", "min_hours": 50, "max_hours": None, "multiplier": 1.9, "avg_hours": 60},
]

DEFAULT_ADDONS = [
    {"id": "gpu", "name": "Ground Power Unit", "price": 50, "category": "ramp", "description": "GPU starts on request"},
    {"id": "detailing", "name": "Extra Detailing", "price": 120, "category": "cosmetic", "description": "One additional full detail per month"},
    {"id": "concierge", "name": "24/7 Concierge Service", "price": 500, "category": "service", "description": "Round-the-clock dedicated support for urgent requests"},
    {"id": "premium-detail", "name": "Premium Detailing Package", "price": 350, "category": "cosmetic", "description": "Ceramic coating maintenance and leather treatment"},
    {"id": "trip-planning", "name": "Trip Planning Service", "price": 250, "category": "service", "description": "Flight planning, weather briefings, FBO arrangements"},
    {
        "id": "multi-aircraft",
        "name": "Multi-Aircraft Management",
        "price": 400,
        "category": "service",
        "description": "Unified billing and fleet-wide coordination",
        "applicable_tiers": ["performance", "turbine"],
    },
]

DEFAULT_LOCATIONS = [
    {
        "id": "none",
        "name": "No Hangar (owner-provided)",
        "slug": "none",
        "hangar_cost_monthly": 0,
        "description": "We service your aircraft at your hangar or ramp",
        "amenities": [],
        "active": True,
    },
    {
        "id": "sky-harbour",
        "name": "Sky Harbour - Denver (KAPA)",
        "slug": "sky-harbour",
        "hangar_cost_monthly": 2000,
        "description": "Premium private hangar campus",
        "amenities": ["Private hangar", "Climate control", "Crew lounge"],
        "address": "Centennial Airport, Englewood, CO",
        "active": True,
    },
    {
        "id": "fa-hangar",
        "name": "Home Base Hangar - Centennial (KAPA)",
        "slug": "fa-hangar",
        "hangar_cost_monthly": 900,
        "description": "Shared heated hangar at our home base",
        "amenities": ["Heated hangar", "Tug service"],
        "address": "Centennial Airport, Englewood, CO",
        "active": True,
    },
]

DEFAULT_ASSUMPTIONS = {
    "labor_rate": 45,
    "card_fee_pct": 2.9,
    "cfi_allocation": 150,
    "cleaning_supplies": 40,
    "overhead_per_ac": 200,
    "avionics_db_per_ac": 30,
}


def default_catalog_state():
    """Fresh copy of the default catalog, shaped like a snapshot payload"""
    return {
        "tiers": [dict(t, features=[dict(f) for f in t["features"]], examples=list(t["examples"])) for t in DEFAULT_TIERS],
        "usage_bands": [dict(b) for b in DEFAULT_USAGE_BANDS],
        "addons": [dict(a) for a in DEFAULT_ADDONS],
        "locations": [dict(loc, amenities=list(loc["amenities"])) for loc in DEFAULT_LOCATIONS],
        "assumptions": dict(DEFAULT_ASSUMPTIONS),
    }
