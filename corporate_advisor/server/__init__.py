"""FastAPI server for Corporate AI Advisor."""
