"""Infrastructure adapters: persistence, observability, security, rendering."""
