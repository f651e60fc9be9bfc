"""Dashboard blueprint and route modules."""
