"""User-facing interfaces for the portal."""
