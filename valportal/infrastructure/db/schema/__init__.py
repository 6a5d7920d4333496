from .manager import ensure_schema, open_empty_catalog
from .migrations import CURRENT_SCHEMA_VERSION, SchemaMigrator

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "ensure_schema",
    "open_empty_catalog",
    "SchemaMigrator",
]
