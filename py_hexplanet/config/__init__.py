"""
Configuration modules for planet generation.
"""

from .config import Settings, settings
from .terrain_settings import (
    CellGeometrySettings,
    ColorBand,
    ColorMode,
    ColorSettings,
    ElevationSettings,
    GradientKey,
)

__all__ = ['Settings', 'settings', 'CellGeometrySettings', 'ColorBand', 'ColorMode',
           'ColorSettings', 'ElevationSettings', 'GradientKey']
