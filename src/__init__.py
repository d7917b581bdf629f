"""pixgen: HTTP image generation service (CAPTCHA, annotated PNG, QR code).

This package contains a small 2-D raster engine and the image generators
and HTTP routes built on top of it.

Architecture layers (strict one-way dependency):
    scripts/ → src/server/ → src/{captcha,imaging}/ → src/raster/ → src/utils/

Key invariants:
    - Pixels are 8-bit non-premultiplied RGBA, row-major, stride == width * 4
    - Each request owns its canvases; fonts and config are shared read-only
    - Geometry off the canvas is clipped silently, never an error
    - YAML-only configs, validated with pydantic
"""

__version__ = "1.0.0"
