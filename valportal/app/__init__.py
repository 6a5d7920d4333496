"""Web application: FastAPI routes, gateway middleware and templates."""
