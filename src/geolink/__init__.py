"""
GeoLink - Google Maps link resolver: coordinates and addresses from arbitrary map URLs.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .container import DependencyContainer
from .resolver import Coordinates, GeoLinkResolver, ResolutionResult

__all__ = ["__version__", "Config", "Coordinates", "DependencyContainer", "GeoLinkResolver", "ResolutionResult"]
