"""Pick'em Scoring & Awards Engine.

Computes pick points (including solo bonus tiers) for weekly sports pick'em
games, persists the computed fields, and derives weekly awards such as top
scorer and perfect week.

Example:
    >>> from pickem_engine.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.db_path)
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Pickem Team"

# Public API exports
from pickem_engine.config import Settings, get_settings

__all__ = [
    "Settings",
    "__author__",
    "__version__",
    "get_settings",
]
