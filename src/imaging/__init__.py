"""Non-CAPTCHA renderers: annotated text images and QR codes."""

from .annotated import render_annotated
from .qr import qr_matrix, render_qrcode

__all__ = [
    'render_annotated',
    'qr_matrix',
    'render_qrcode',
]
