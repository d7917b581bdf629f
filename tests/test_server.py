"""Test the HTTP layer.

Tests for src.server.app (FastAPI TestClient):
    - /captcha, /qrcode, /image return image/png with the requested size
    - Defaults come from ServiceConfig
    - Invalid parameters → 400 {"error": ...}
    - Size limits from config are enforced
    - Unexpected rendering failures → 500 {"error": "Failed to encode image"}
    - CORS headers on cross-origin requests

Run:
    pytest tests/test_server.py -v
"""

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from src.server import app as app_mod
from src.server import create_app
from src.utils.validators import ServiceConfig


@pytest.fixture(scope="module")
def client():
    return TestClient(create_app())


def png_size(response):
    assert response.status_code == 200, response.text
    assert response.headers["content-type"] == "image/png"
    return Image.open(io.BytesIO(response.content)).size


def assert_bad_request(response, fragment=None):
    assert response.status_code == 400
    body = response.json()
    assert "error" in body
    if fragment:
        assert fragment in body["error"]


# ============================================================================
# CAPTCHA
# ============================================================================

def test_captcha_default(client):
    assert png_size(client.get("/captcha")) == (120, 30)


def test_captcha_custom(client):
    resp = client.get("/captcha", params={"width": "200", "height": "60", "code": "AB12"})
    assert png_size(resp) == (200, 60)


@pytest.mark.parametrize("params,fragment", [
    ({"width": "abc"}, "width"),
    ({"height": "1.5"}, "height"),
    ({"width": "0"}, "width"),
    ({"height": "-4"}, "height"),
    ({"width": "5000"}, "exceeds"),
])
def test_captcha_invalid(client, params, fragment):
    assert_bad_request(client.get("/captcha", params=params), fragment)


def test_captcha_defaults_from_config():
    cfg = ServiceConfig(captcha={"width": 90, "height": 40})
    resp = TestClient(create_app(cfg)).get("/captcha")
    assert png_size(resp) == (90, 40)


# ============================================================================
# QR CODE
# ============================================================================

def test_qrcode_default(client):
    assert png_size(client.get("/qrcode")) == (300, 300)


def test_qrcode_custom(client):
    resp = client.get("/qrcode", params={
        "text": "https://example.com", "level": "m", "size": "256",
        "color": "#1f3a93", "margin": "16",
    })
    assert png_size(resp) == (256, 256)


@pytest.mark.parametrize("params,fragment", [
    ({"level": "X"}, "level"),
    ({"size": "big"}, "size"),
    ({"size": "0"}, "size"),
    ({"margin": "100"}, "margin"),
    ({"color": "nope"}, "color"),
    ({"size": "5000"}, "exceeds"),
    ({"size": "10"}, "fit"),
])
def test_qrcode_invalid(client, params, fragment):
    assert_bad_request(client.get("/qrcode", params=params), fragment)


def test_qrcode_render_failure_is_500(client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("encoder exploded")

    monkeypatch.setattr(app_mod, "render_qrcode", boom)
    resp = client.get("/qrcode", params={"text": "x"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to encode image"}


# ============================================================================
# ANNOTATED IMAGE
# ============================================================================

def test_image_default(client):
    assert png_size(client.get("/image")) == (500, 100)


def test_image_custom(client):
    resp = client.get("/image", params={
        "text": "0x1234abcd", "tipText": "check the address", "width": "640", "height": "120",
    })
    assert png_size(resp) == (640, 120)


@pytest.mark.parametrize("params", [{"width": "-1"}, {"height": "zero"}, {"width": "100000"}])
def test_image_invalid(client, params):
    assert_bad_request(client.get("/image", params=params))


# ============================================================================
# CORS
# ============================================================================

def test_cors_headers(client):
    resp = client.get("/captcha", headers={"Origin": "https://site.example"})
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] in ("*", "https://site.example")
    assert resp.headers.get("access-control-allow-credentials") == "true"


def test_cors_preflight(client):
    resp = client.options("/qrcode", headers={
        "Origin": "https://site.example",
        "Access-Control-Request-Method": "GET",
    })
    assert resp.status_code == 200
    assert "access-control-allow-origin" in resp.headers
