"""Render CAPTCHA images to PNG files.

Useful for eyeballing the renderers without running the server.

CLI:
    python scripts/render_captcha.py --output outputs/captcha.png
    python scripts/render_captcha.py --output outputs/c.png --width 200 --height 60 \\
                                     --code AB12 --disturbance high --seed 3
    python scripts/render_captcha.py --output outputs/batch/ --count 10
"""

import argparse
import logging
from pathlib import Path

from src.captcha import CaptchaGenerator
from src.utils import fs, validators
from src.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def render_main(
    output: str,
    width: int,
    height: int,
    code: str = "",
    count: int = 1,
    disturbance: str = "normal",
    seed=None,
    config_path: str = "configs/service.v1.yaml",
):
    """Render ``count`` CAPTCHAs; returns [(path, code), ...].

    ``output`` is a file path for a single image and a directory otherwise.
    """
    settings = validators.load_service_config(config_path).captcha
    gen = CaptchaGenerator(
        width,
        height,
        disturbance=disturbance,
        front_colors=settings.front_colors,
        background_colors=settings.background_colors,
        font_path=settings.font_path,
        seed=seed,
        warp_min_height=settings.warp_min_height,
    )

    results = []
    for i in range(count):
        canvas, text = gen.create(code, length=settings.length, charset=settings.charset)
        if count == 1:
            path = Path(output)
        else:
            path = fs.ensure_dir(output) / f"captcha_{i:03d}_{text}.png"
        fs.atomic_save_image(canvas, path)
        logger.info(f"Saved {path} (code={text})")
        results.append((path, text))
    return results


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Render CAPTCHA images to PNG")
    parser.add_argument(
        "--output",
        type=str,
        required=True,
        help="Output PNG path (or directory when --count > 1)",
    )
    parser.add_argument("--width", type=int, default=120, help="Image width (px)")
    parser.add_argument("--height", type=int, default=30, help="Image height (px)")
    parser.add_argument("--code", type=str, default="", help="Text to draw (random when empty)")
    parser.add_argument("--count", type=int, default=1, help="Number of images")
    parser.add_argument(
        "--disturbance",
        type=str,
        default="normal",
        choices=["normal", "medium", "high"],
        help="Noise level",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/service.v1.yaml",
        help="Path to service config",
    )

    args = parser.parse_args()

    setup_logging(log_level="INFO", context={"app": "render_captcha"})

    results = render_main(
        output=args.output,
        width=args.width,
        height=args.height,
        code=args.code,
        count=args.count,
        disturbance=args.disturbance,
        seed=args.seed,
        config_path=args.config,
    )

    print("\n=== Render Complete ===")
    for path, text in results:
        print(f"{path}: {text}")


if __name__ == "__main__":
    main()
