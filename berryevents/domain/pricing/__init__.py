"""Pricing domain - money helpers and multi-service payment aggregation"""

from .router import router

__all__ = ["router"]
