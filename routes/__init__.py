"""
Routes package for the HTTP tool surface.
"""

from .tools import router as tools_router

__all__ = ["tools_router"]
