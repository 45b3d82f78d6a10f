"""Middleware."""
from healtara.middleware.microsites import MicrositeMiddleware

__all__ = ["MicrositeMiddleware"]
