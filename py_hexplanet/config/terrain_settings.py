"""
Value objects driving cell geometry, elevation and coloring.

Out-of-range values are normalized rather than rejected: sizes are clamped
into their valid interval and inverted bounds are swapped.
"""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

RGBA = Tuple[float, float, float, float]

WATER_BLUE: RGBA = (0.0, 0.0, 1.0, 1.0)
BEACH_YELLOW: RGBA = (1.0, 0.92, 0.016, 1.0)
LOWLAND_GREEN: RGBA = (0.0, 1.0, 0.0, 1.0)
HIGHLAND_GREEN: RGBA = (0.1, 0.55, 0.1, 1.0)
MOUNTAIN_GRAY: RGBA = (0.5, 0.5, 0.5, 1.0)

MIN_INNER_CELL_SIZE = 0.01
MAX_INNER_CELL_SIZE = 0.99


class CellGeometrySettings(BaseModel):
    """Shape of the terraced cell geometry."""

    elevation_step: float = Field(default=0.05, description="Radial height per elevation unit")
    terraces_per_slope: int = Field(default=2, description="Flat terraces on a one-unit slope")
    inner_cell_size: float = Field(
        default=0.8, description="Fraction of the cell covered by its flat inner face"
    )

    @field_validator("elevation_step")
    @classmethod
    def _non_negative_step(cls, value: float) -> float:
        return max(0.0, value)

    @field_validator("terraces_per_slope")
    @classmethod
    def _at_least_one_terrace(cls, value: int) -> int:
        return max(1, value)

    @field_validator("inner_cell_size")
    @classmethod
    def _clamp_inner_size(cls, value: float) -> float:
        return min(max(value, MIN_INNER_CELL_SIZE), MAX_INNER_CELL_SIZE)

    @property
    def outer_cell_size(self) -> float:
        return 1.0 - self.inner_cell_size

    @property
    def terrace_steps(self) -> int:
        """Horizontal steps across a one-unit slope."""
        return self.terraces_per_slope * 2 + 1

    def elevation_factor(self, elevation: int) -> float:
        """Radial scale applied to a unit-sphere point at ``elevation``."""
        return 1.0 + self.elevation_step * elevation


class ElevationSettings(BaseModel):
    """Noise parameters for the elevation filter."""

    seed: int = Field(default=0, description="Noise seed")
    center: Tuple[float, float, float] = Field(
        default=(0.0, 0.0, 0.0), description="Offset added to the sampled noise position"
    )
    roughness: float = Field(default=1.0, description="Noise frequency multiplier")
    min_elevation: int = Field(default=0, description="Lowest elevation")
    max_elevation: int = Field(default=5, description="Highest elevation")
    water_level: Optional[int] = Field(
        default=None, description="Cells below this elevation are raised to it (flat seas)"
    )

    @model_validator(mode="after")
    def _ordered_bounds(self) -> "ElevationSettings":
        if self.min_elevation > self.max_elevation:
            self.min_elevation, self.max_elevation = self.max_elevation, self.min_elevation
        return self


class ColorMode(str, Enum):
    """How the color filter resolves a cell color."""

    BANDED = "banded"
    GRADIENT = "gradient"


class ColorBand(BaseModel):
    """Color used for elevations up to and including ``threshold``."""

    threshold: int
    color: RGBA


class GradientKey(BaseModel):
    """A color stop on the continuous gradient, ``position`` in [0, 1]."""

    position: float = Field(ge=0.0, le=1.0)
    color: RGBA


def _default_gradient() -> List[GradientKey]:
    return [
        GradientKey(position=0.0, color=(0.02, 0.1, 0.45, 1.0)),
        GradientKey(position=0.4, color=WATER_BLUE),
        GradientKey(position=0.45, color=BEACH_YELLOW),
        GradientKey(position=0.6, color=LOWLAND_GREEN),
        GradientKey(position=0.8, color=MOUNTAIN_GRAY),
        GradientKey(position=1.0, color=(1.0, 1.0, 1.0, 1.0)),
    ]


class ColorSettings(BaseModel):
    """Palette for the color filter."""

    mode: ColorMode = Field(default=ColorMode.BANDED, description="Banded palette or noise gradient")

    # Banded palette
    water: RGBA = Field(default=WATER_BLUE)
    water_height: int = Field(default=1)
    beach: RGBA = Field(default=BEACH_YELLOW)
    beach_height: int = Field(default=2)
    lowland: RGBA = Field(default=LOWLAND_GREEN)
    lowland_height: int = Field(default=4)
    highland: RGBA = Field(default=HIGHLAND_GREEN)
    highland_height: int = Field(default=6)
    mountain: RGBA = Field(default=MOUNTAIN_GRAY)

    # Continuous gradient
    gradient: List[GradientKey] = Field(default_factory=_default_gradient)
    gradient_seed: int = Field(default=0, description="Seed of the noise sampled into the gradient")
    gradient_roughness: float = Field(default=1.0, description="Frequency of the gradient noise")

    @field_validator("gradient")
    @classmethod
    def _sorted_keys(cls, keys: List[GradientKey]) -> List[GradientKey]:
        return sorted(keys, key=lambda k: k.position)

    def bands(self) -> List[ColorBand]:
        """Banded palette ordered by threshold (mountain color is the fallback)."""
        bands = [
            ColorBand(threshold=self.water_height, color=self.water),
            ColorBand(threshold=self.beach_height, color=self.beach),
            ColorBand(threshold=self.lowland_height, color=self.lowland),
            ColorBand(threshold=self.highland_height, color=self.highland),
        ]
        return sorted(bands, key=lambda b: b.threshold)
