"""Process-level defaults, overridable from the environment or a .env file."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings pulled from ``HEXPLANET_*`` environment variables."""

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Logging format (console or json)")

    # Planet Generation Configuration
    default_subdivisions: int = Field(default=4, description="Default icosphere subdivision level")
    max_subdivisions: int = Field(default=30, description="Max allowed subdivision level")
    default_radius: float = Field(default=1.0, description="Default planet radius")

    # Geometry tolerances
    point_tolerance: float = Field(
        default=1e-9, description="Dedup tolerance for icosphere and cell corner points"
    )
    vertex_tolerance: float = Field(
        default=1e-7, description="Weld tolerance for terrain mesh vertices (relative to radius)"
    )

    # Incremental rebuild budget
    max_rebuild_ms: int = Field(default=250, description="Per-call time budget for dirty chunk rebuilds")

    model_config = SettingsConfigDict(
        env_prefix="HEXPLANET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
