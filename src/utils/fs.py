"""Filesystem helpers: atomic writes, PNG encoding and YAML loading.

Provides:
    - Atomic writes: tmp file → fsync → rename (prevents partial reads)
    - PNG encoding of canvases / RGBA arrays via Pillow
    - YAML loading with safe_load
    - Directory creation with exist_ok semantics

All paths use pathlib.Path for cross-platform compatibility.

Usage:
    from src.utils import fs
    png = fs.encode_png(canvas)
    fs.atomic_save_image(canvas, "outputs/captcha.png")
    cfg = fs.load_yaml("configs/service.v1.yaml")
"""

import io
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import yaml
from PIL import Image


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory if it doesn't exist, return Path object.

    Parameters
    ----------
    p : Union[str, Path]
        Directory path

    Returns
    -------
    Path
        Path object (guaranteed to exist)
    """
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(
    path: Union[str, Path],
    data: bytes,
    tmp_suffix: str = ".tmp"
) -> None:
    """Write bytes to file atomically (tmp → fsync → rename).

    Parameters
    ----------
    path : Union[str, Path]
        Target file path
    data : bytes
        Data to write
    tmp_suffix : str
        Temporary file suffix, default ".tmp"

    Notes
    -----
    Uses same directory for tmp file to ensure atomic rename on same filesystem.
    """
    path = Path(path)
    ensure_dir(path.parent)

    tmp_path = path.with_suffix(path.suffix + tmp_suffix)

    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        # Atomic rename (overwrites existing file on POSIX)
        tmp_path.replace(path)
    except Exception as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise RuntimeError(f"Failed to write {path} atomically: {e}") from e


def _as_rgba_array(img: Any) -> np.ndarray:
    """Return an (H, W, 4) uint8 array for a Canvas or array input."""
    # Canvas exposes its buffer as .pixels
    arr = getattr(img, "pixels", img)
    arr = np.asarray(arr)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError(f"Expected RGBA image (H, W, 4), got shape {arr.shape}")
    if arr.dtype != np.uint8:
        arr = np.clip(arr, 0, 255).astype(np.uint8)
    return arr


def encode_png(img: Any, pil_kwargs: Optional[Dict[str, Any]] = None) -> bytes:
    """Encode a Canvas or (H, W, 4) uint8 array as PNG bytes.

    Parameters
    ----------
    img : Canvas or np.ndarray
        RGBA image
    pil_kwargs : Optional[Dict[str, Any]]
        Additional kwargs for PIL.Image.save (e.g., optimize=True)

    Returns
    -------
    bytes
        PNG file contents
    """
    buf = io.BytesIO()
    Image.fromarray(_as_rgba_array(img)).save(buf, format="PNG", **(pil_kwargs or {}))
    return buf.getvalue()


def atomic_save_image(
    img: Any,
    path: Union[str, Path],
    pil_kwargs: Optional[Dict[str, Any]] = None
) -> None:
    """Save a Canvas or RGBA array as PNG atomically.

    Parameters
    ----------
    img : Canvas or np.ndarray
        RGBA image
    path : Union[str, Path]
        Target file path
    pil_kwargs : Optional[Dict[str, Any]]
        Additional kwargs for PIL.Image.save
    """
    atomic_write_bytes(path, encode_png(img, pil_kwargs))


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content (empty dict for an empty file)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
