"""API routers, versioned by URL prefix."""
