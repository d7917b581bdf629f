"""CAPTCHA rendering (noise background, jittered glyphs, optional warp)."""

from .generator import CHARSETS, CaptchaGenerator, Disturbance, generate_captcha_png

__all__ = [
    'CHARSETS',
    'CaptchaGenerator',
    'Disturbance',
    'generate_captcha_png',
]
