"""
API package for findimagedupes.

Provides Flask routes and background scan orchestration for the web API.
"""

from __future__ import annotations

from .routes import api

__all__ = ['api']
