"""HTTP surface of the image service.

Routes (GET, all return image/png):
    /captcha  width, height, code        → CAPTCHA (random code when empty)
    /qrcode   text, level, size, color, margin → QR code
    /image    text, width, height, tipText     → annotated text image

Query parameters are read as strings, defaulted from ServiceConfig and
validated by the request models in src.utils.validators. Invalid input
yields 400 {"error": "..."}; any other rendering failure is logged and
yields 500 {"error": "Failed to encode image"}.

Endpoints are plain ``def`` functions, so FastAPI runs them on its
threadpool; each request renders on its own canvases.

Usage:
    from src.server import create_app
    app = create_app(load_service_config("configs/service.v1.yaml"))
"""

import logging
from typing import Callable, Optional

from fastapi import FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .. import __version__
from ..captcha import generate_captcha_png
from ..imaging import render_annotated, render_qrcode
from ..utils import fs
from ..utils.logging_config import log_context
from ..utils.validators import (
    AnnotatedImageRequest,
    CaptchaRequest,
    QRCodeRequest,
    ServiceConfig,
)

logger = logging.getLogger(__name__)

PNG_MEDIA_TYPE = "image/png"
ENCODE_FAILURE = "Failed to encode image"


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": message})


def _describe(e: ValidationError) -> str:
    """First validation problem as a short human-readable message."""
    err = e.errors()[0]
    msg = err.get("msg", "invalid value")
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"Invalid {loc}: {msg}" if loc else msg


def _check_limit(name: str, value: int, limit: int) -> None:
    if value > limit:
        raise ValueError(f"{name} {value} exceeds the limit of {limit}")


def _png_response(render: Callable[[], bytes]) -> Response:
    try:
        png = render()
    except ValidationError as e:
        return _error(400, _describe(e))
    except ValueError as e:
        return _error(400, str(e))
    except Exception:
        logger.exception("Rendering failed")
        return _error(500, ENCODE_FAILURE)
    return Response(content=png, media_type=PNG_MEDIA_TYPE)


def create_app(cfg: Optional[ServiceConfig] = None) -> FastAPI:
    """Build the FastAPI application.

    Parameters
    ----------
    cfg : ServiceConfig, optional
        Service configuration; defaults to ServiceConfig() when omitted

    Returns
    -------
    FastAPI
        App with CORS, request-path logging context and the three image routes
    """
    cfg = cfg or ServiceConfig()

    app = FastAPI(title="pixgen", version=__version__)
    app.state.config = cfg

    cors = cfg.server.cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.allow_origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        with log_context(path=request.url.path):
            return await call_next(request)

    @app.get("/captcha")
    def captcha(
        width: Optional[str] = None,
        height: Optional[str] = None,
        code: str = "",
    ) -> Response:
        settings = cfg.captcha

        def render() -> bytes:
            req = CaptchaRequest(
                width=width if width is not None else settings.width,
                height=height if height is not None else settings.height,
                code=code,
            )
            _check_limit("width", req.width, settings.max_width)
            _check_limit("height", req.height, settings.max_height)
            return generate_captcha_png(req.width, req.height, req.code, settings=settings)

        return _png_response(render)

    @app.get("/qrcode")
    def qrcode(
        text: Optional[str] = None,
        level: Optional[str] = None,
        size: Optional[str] = None,
        color: Optional[str] = None,
        margin: Optional[str] = None,
    ) -> Response:
        settings = cfg.qrcode

        def render() -> bytes:
            req = QRCodeRequest(
                text=text if text is not None else settings.text,
                level=level if level is not None else settings.level,
                size=size if size is not None else settings.size,
                color=color if color is not None else settings.color,
                margin=margin if margin is not None else settings.margin,
            )
            _check_limit("size", req.size, settings.max_size)
            canvas = render_qrcode(req.text, req.level, req.size, req.color, req.margin)
            return fs.encode_png(canvas)

        return _png_response(render)

    @app.get("/image")
    def image(
        text: Optional[str] = None,
        width: Optional[str] = None,
        height: Optional[str] = None,
        tip_text: Optional[str] = Query(None, alias="tipText"),
    ) -> Response:
        settings = cfg.image

        def render() -> bytes:
            req = AnnotatedImageRequest(
                text=text if text is not None else settings.text,
                tip_text=tip_text if tip_text is not None else settings.tip_text,
                width=width if width is not None else settings.width,
                height=height if height is not None else settings.height,
            )
            _check_limit("width", req.width, settings.max_width)
            _check_limit("height", req.height, settings.max_height)
            canvas = render_annotated(
                req.text, req.tip_text, req.width, req.height, settings.font_path
            )
            return fs.encode_png(canvas)

        return _png_response(render)

    logger.info(
        f"Service app created: captcha default {cfg.captcha.width}x{cfg.captcha.height}, "
        f"qrcode default {cfg.qrcode.size}px"
    )
    return app
