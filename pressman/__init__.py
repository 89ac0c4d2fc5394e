"""
Django Pressman - print-job pricing and compatibility.

Usage:
    from pressman import PricingService, PricingError

    result = PricingService.resolve_options("A5", {"book_size": "A5", "paper_type": "offset"})
    quote = PricingService.calculate_price("A5", selection)
"""


def __getattr__(name):
    if name == "PricingService":
        from pressman.service import PricingService

        return PricingService
    elif name == "PricingError":
        from pressman.exceptions import PricingError

        return PricingError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["PricingService", "PricingError"]
__version__ = "0.1.0"
