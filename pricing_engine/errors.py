# Pricing errors raised by the engine and handled at the API edge


class PricingError(Exception):
    """Base class for all pricing engine errors"""


class NotFound(PricingError, LookupError):
    """A referenced tier, usage band or location does not exist in the payload"""

    def __init__(self, kind, ref):
        self.kind = kind
        self.ref = ref
        super().__init__(f"Unknown {kind}: {ref!r}")


class MissingInput(PricingError, ValueError):
    """A required selection (tier or usage band) was not supplied"""

    def __init__(self, field):
        self.field = field
        super().__init__(f"Missing required selection: {field}")


class InvalidOverride(PricingError):
    """An aircraft override points at an aircraft, location or class that is gone"""

    def __init__(self, aircraft_id, reason):
        self.aircraft_id = aircraft_id
        self.reason = reason
        super().__init__(f"Override for aircraft {aircraft_id} is stale: {reason}")


class InvalidCatalog(PricingError, ValueError):
    """Catalog rows break a catalog rule and cannot be priced or published"""

    def __init__(self, problems):
        if isinstance(problems, str):
            problems = [problems]
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))
