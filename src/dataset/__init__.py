from __future__ import annotations

from .base import DatasetError, SchemesClient
from .http import PoliteHttpClient
from .snapshot import SnapshotSchemesClient
from .supabase import SupabaseSchemesClient

__all__ = [
    "DatasetError",
    "PoliteHttpClient",
    "SchemesClient",
    "SnapshotSchemesClient",
    "SupabaseSchemesClient",
]
