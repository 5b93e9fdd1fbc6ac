"""Client lookup service."""

from .service import BulkLookupResult, LookupService, unique_codes

__all__ = ["BulkLookupResult", "LookupService", "unique_codes"]
