"""
Middleware modules for the Corporate AI Advisor server.
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
