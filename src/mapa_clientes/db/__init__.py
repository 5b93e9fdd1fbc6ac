"""Database clients and utilities."""

from .supabase import ClientStore

__all__ = ["ClientStore"]
