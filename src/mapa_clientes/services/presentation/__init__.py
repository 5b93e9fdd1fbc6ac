"""Map presentation helpers: response normalization, popups and markers."""

from .fields import FIELD_FALLBACKS, normalize_client, resolve_field
from .markers import build_marker_collection, compute_bounds, parse_codes, status_message
from .popup import build_popup

__all__ = [
    "FIELD_FALLBACKS",
    "build_marker_collection",
    "build_popup",
    "compute_bounds",
    "normalize_client",
    "parse_codes",
    "resolve_field",
    "status_message",
]
