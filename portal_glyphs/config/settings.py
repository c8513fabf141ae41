"""
Application Settings
===================

Main application settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from pathlib import Path
from typing import Any, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

RES_DIR = Path(__file__).resolve().parent.parent / "res"

RGBA = Tuple[int, int, int, int]


def parse_color(value: Any) -> Any:
    """Accept ``#RRGGBB`` / ``#RRGGBBAA`` strings as well as 3- or 4-tuples."""
    if isinstance(value, str):
        raw = value.strip().lstrip("#")
        if len(raw) not in (6, 8):
            raise ValueError(f"Color must be #RRGGBB or #RRGGBBAA, got {value!r}")
        try:
            channels = [int(raw[i : i + 2], 16) for i in range(0, len(raw), 2)]
        except ValueError:
            raise ValueError(f"Color must be hexadecimal, got {value!r}")
        value = channels
    if isinstance(value, (list, tuple)):
        if len(value) == 3:
            value = (*value, 255)
        if len(value) != 4:
            raise ValueError("Color must have 3 or 4 channels")
        for channel in value:
            if not 0 <= int(channel) <= 255:
                raise ValueError(f"Color channel out of range: {channel}")
        return tuple(int(c) for c in value)
    return value


class ImageSettings(BaseModel):
    """Geometry and styling of a portal glyph image. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(default=800, gt=0, description="Canvas width in pixels")
    height: int = Field(default=45, gt=0, description="Canvas height in pixels")
    border_width: int = Field(default=1, description="Border thickness in pixels; <= 0 disables it")
    background_color: RGBA = Field(
        default=(0x00, 0x00, 0x00, 0x2C), description="Translucent background fill"
    )
    foreground_color: RGBA = Field(
        default=(0x00, 0xB0, 0xBD, 0xFF), description="Glyph and border color"
    )
    font_size: float = Field(default=50, gt=0, description="Font size in points")
    dpi: float = Field(default=72, gt=0, description="Rendering resolution")
    baseline_offset: int = Field(default=10, description="Pixels the baseline sits above the font size")

    @field_validator("background_color", "foreground_color", mode="before")
    @classmethod
    def validate_color(cls, v: Any) -> Any:
        """Normalise color notations to an RGBA tuple."""
        return parse_color(v)

    @property
    def font_size_px(self) -> float:
        """Font size converted from points to pixels at the configured DPI."""
        return self.font_size * self.dpi / 72

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Portal Glyph Server", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(
        default=9192,
        validation_alias=AliasChoices("PORTAL_PORT", "PORT"),
        description="Server port",
    )

    # Static front-end
    skip_embed: bool = Field(
        default=False,
        validation_alias=AliasChoices("PORTAL_SKIP_EMBED", "SKIPEMBED"),
        description="Serve the front-end from a live directory instead of the packaged one",
    )
    static_dir: Path = Field(
        default=Path("res"), description="Live front-end directory used when skip_embed is set"
    )

    # Storage Configuration
    cache_dir: Path = Field(default=Path("cache"), description="Rendered image cache directory")
    cache_retry_backoff: float = Field(
        default=0.05, ge=0, description="Delay before the single cache I/O retry, in seconds"
    )
    cache_max_age: int = Field(
        default=86400, ge=0, description="Cache-Control max-age for served images"
    )

    # Rendering Configuration
    font_path: Path = Field(
        default=RES_DIR / "NMS-Glyphs-Mono.ttf", description="Glyph font used for rendering"
    )
    eager_font_load: bool = Field(default=True, description="Load the font at startup")
    request_timeout: float = Field(
        default=30.0, gt=0, description="Deadline for a single image request, in seconds"
    )
    png_compress_level: int = Field(default=6, ge=0, le=9, description="zlib level for PNG output")
    image: ImageSettings = Field(default_factory=ImageSettings)

    # Monitoring Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Path = Field(default=Path("logs"), description="Directory for rotating log files")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @property
    def frontend_dir(self) -> Path:
        """Directory the static front-end is served from."""
        return self.static_dir if self.skip_embed else RES_DIR

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="PORTAL_",
        env_nested_delimiter="__",
        populate_by_name=True,
        extra="ignore",
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
