"""YAML schema validation, config loading and request parameter models.

Provides centralized validation using pydantic:
    - Service schema (service.v1.yaml): server, captcha, qrcode, image, logging
    - Request models for the HTTP query parameters of /captcha, /qrcode, /image

All entry points must use these validators to load configs for fail-fast
error detection with actionable messages (offending keys, expected ranges).

Units:
    - Sizes: pixels
    - Colors: names or hex strings, parsed by src.utils.color

Usage:
    from src.utils import validators

    cfg = validators.load_service_config("configs/service.v1.yaml")
    req = validators.QRCodeRequest(text="hello", size=256)
"""

from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from . import color as color_utils

CHARSET_NAMES = ("numbers", "alphabet", "alphanumeric")


def _check_color(v: str) -> str:
    color_utils.parse_color(v)
    return v


# ============================================================================
# SERVICE SCHEMA V1
# ============================================================================

class CorsSettings(BaseModel):
    """CORS policy applied to every route."""
    model_config = ConfigDict(frozen=True)

    allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    allow_credentials: bool = True
    allow_methods: List[str] = Field(default_factory=lambda: ["GET", "OPTIONS"])
    allow_headers: List[str] = Field(default_factory=lambda: ["*"])


class ServerSettings(BaseModel):
    """HTTP listener."""
    model_config = ConfigDict(frozen=True)

    host: str = Field("0.0.0.0", description="Bind address")
    port: int = Field(8080, ge=1, le=65535, description="Bind port")
    cors: CorsSettings = Field(default_factory=CorsSettings)


class CaptchaSettings(BaseModel):
    """CAPTCHA defaults and limits."""
    model_config = ConfigDict(frozen=True)

    width: int = Field(120, gt=0, description="Default width (px)")
    height: int = Field(30, gt=0, description="Default height (px)")
    max_width: int = Field(1000, gt=0, description="Largest accepted width (px)")
    max_height: int = Field(500, gt=0, description="Largest accepted height (px)")
    length: int = Field(4, ge=1, le=16, description="Characters in a random code")
    charset: str = Field("alphanumeric", description="Character set for random codes")
    disturbance: Literal["normal", "medium", "high"] = "normal"
    front_colors: List[str] = Field(default_factory=lambda: ["black"])
    background_colors: List[str] = Field(default_factory=lambda: ["white"])
    font_path: Optional[str] = Field(None, description="TrueType font; None uses Pillow's default")
    warp_min_height: int = Field(48, ge=1, description="Warp the text layer from this height up")

    @field_validator('charset')
    @classmethod
    def validate_charset(cls, v: str) -> str:
        if v not in CHARSET_NAMES:
            raise ValueError(f"charset must be one of {CHARSET_NAMES}, got '{v}'")
        return v

    @field_validator('front_colors', 'background_colors')
    @classmethod
    def validate_colors(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("at least one color is required")
        return [_check_color(c) for c in v]

    @model_validator(mode='after')
    def validate_defaults_within_limits(self) -> 'CaptchaSettings':
        if self.width > self.max_width or self.height > self.max_height:
            raise ValueError(
                f"default size {self.width}x{self.height} exceeds limit "
                f"{self.max_width}x{self.max_height}"
            )
        return self


class QRCodeSettings(BaseModel):
    """QR code defaults and limits."""
    model_config = ConfigDict(frozen=True)

    text: str = "null"
    level: Literal["L", "M", "Q", "H"] = "H"
    size: int = Field(300, gt=0, description="Default edge length (px)")
    max_size: int = Field(2000, gt=0, description="Largest accepted edge length (px)")
    color: str = "000000"
    margin: int = Field(0, ge=0, description="Default quiet margin (px)")

    @field_validator('color')
    @classmethod
    def validate_color(cls, v: str) -> str:
        return _check_color(v)


class ImageSettings(BaseModel):
    """Annotated image defaults and limits."""
    model_config = ConfigDict(frozen=True)

    text: str = "null"
    tip_text: str = "Check this address against the copied one before transferring"
    width: int = Field(500, gt=0)
    height: int = Field(100, gt=0)
    max_width: int = Field(4000, gt=0)
    max_height: int = Field(4000, gt=0)
    font_path: Optional[str] = None


class LoggingSettings(BaseModel):
    """Arguments forwarded to logging_config.setup_logging()."""
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: Optional[str] = None
    json_format: bool = Field(False, alias="json")
    color: bool = True
    quiet_libs: List[str] = Field(default_factory=lambda: ["PIL"])

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class ServiceConfig(BaseModel):
    """Complete service configuration (service.v1.yaml)."""
    schema_version: str = Field("service.v1", alias="schema")
    server: ServerSettings = Field(default_factory=ServerSettings)
    captcha: CaptchaSettings = Field(default_factory=CaptchaSettings)
    qrcode: QRCodeSettings = Field(default_factory=QRCodeSettings)
    image: ImageSettings = Field(default_factory=ImageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "service.v1":
            raise ValueError(f"Expected schema 'service.v1', got '{v}'")
        return v


# ============================================================================
# REQUEST MODELS
# ============================================================================

class CaptchaRequest(BaseModel):
    """Query parameters of GET /captcha."""
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    code: str = Field("", max_length=32)


class QRCodeRequest(BaseModel):
    """Query parameters of GET /qrcode."""
    text: str = Field(..., min_length=1)
    level: Literal["L", "M", "Q", "H"] = "H"
    size: int = Field(..., gt=0)
    color: str = "000000"
    margin: int = Field(0, ge=0)

    @field_validator('level', mode='before')
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('color')
    @classmethod
    def validate_color(cls, v: str) -> str:
        return _check_color(v)

    @model_validator(mode='after')
    def validate_margin(self) -> 'QRCodeRequest':
        if self.margin * 4 > self.size:
            raise ValueError(
                f"margin {self.margin} must not exceed a quarter of size {self.size}"
            )
        return self


class AnnotatedImageRequest(BaseModel):
    """Query parameters of GET /image."""
    text: str = "null"
    tip_text: str = Field("", alias="tipText")
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    model_config = ConfigDict(populate_by_name=True)


# ============================================================================
# PUBLIC API
# ============================================================================

def load_service_config(path: Union[str, Path]) -> ServiceConfig:
    """Load and validate the service config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to service.v1.yaml file

    Returns
    -------
    ServiceConfig
        Validated service configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Service config not found: {path}")

    data = fs.load_yaml(path)
    try:
        return ServiceConfig(**data)
    except Exception as e:
        raise ValueError(f"Service config validation failed at {path}: {e}") from e
