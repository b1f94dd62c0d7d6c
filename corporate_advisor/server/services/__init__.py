"""Dependency providers for the API endpoints."""
