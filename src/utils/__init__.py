"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Config and request validation (validators)
    - Color parsing (color)
    - Atomic I/O and PNG encoding (fs)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (raster, captcha, imaging, server).

Convenience imports:
    from src.utils import fs, color, validators
    from src.utils.logging_config import setup_logging, get_logger
"""

# Re-export commonly used modules for convenience
from . import color
from . import fs
from . import logging_config
from . import validators

# Common functions for direct import
from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'color',
    'fs',
    'logging_config',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
]
