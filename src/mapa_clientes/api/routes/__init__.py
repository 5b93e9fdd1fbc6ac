"""API route modules."""

from . import clients, distribution_centers, health, legacy, map

__all__ = ["clients", "distribution_centers", "health", "legacy", "map"]
