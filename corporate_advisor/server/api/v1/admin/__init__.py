"""Admin-only endpoints."""
