from .config import (DEFAULT_DB_TIMEOUT, DEFAULT_FRAME_HOST_TEMPLATE,
                     get_config, get_default_timeout,
                     get_domain_name_overrides, get_frame_host_template,
                     get_path_config, load_config)
from .connection import (DatabaseError, connect, get_connection, iso_utcnow,
                         make_read_only)
from .schema import SchemaMigrator, ensure_schema, open_empty_catalog

__all__ = [
    "DEFAULT_DB_TIMEOUT",
    "DEFAULT_FRAME_HOST_TEMPLATE",
    "DatabaseError",
    "connect",
    "get_config",
    "get_connection",
    "get_default_timeout",
    "get_domain_name_overrides",
    "get_frame_host_template",
    "get_path_config",
    "iso_utcnow",
    "load_config",
    "make_read_only",
    "SchemaMigrator",
    "ensure_schema",
    "open_empty_catalog",
]
