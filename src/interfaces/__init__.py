"""Public interface definitions for external service providers.

External APIs are accessed exclusively through the abstract base classes
defined in this package.  Concrete adapters implement these interfaces and
are injected at runtime, so services can be unit tested with a mock
provider and the listing backend can be swapped in one place (main.py).

CONCRETE PROVIDER MAP:
    Interface          →  Concrete implementations (in src/providers/)
    ──────────────────────────────────────────────────────────────
    IListingProvider   →  SetlistFmProvider
"""

from src.interfaces.listing_provider import IListingProvider

__all__ = ["IListingProvider"]
