"""Concurrent requests must each get their own result."""

import asyncio

import httpx
import pytest

from conftest import FakeSegmentationAPI, open_png, solid_png
from cutout_service.main import build_app
from image_relay import Settings

RED = (200, 10, 10, 255)
BLUE = (10, 10, 200, 255)


@pytest.fixture
def anyio_backend():
    return "asyncio"


def _app(api):
    settings = Settings(photoroom_api_key="test-key", photoroom_segment_url="https://segment.test/v1/segment")
    return build_app(settings, transport=httpx.MockTransport(api))


@pytest.mark.anyio
async def test_concurrent_corner_requests_do_not_interfere():
    app = _app(FakeSegmentationAPI())
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(transport=transport, base_url="http://relay") as client:
        red, blue = await asyncio.gather(
            client.post("/add-corner-pixels", files={"image_file": ("red.png", solid_png(RED, (9, 6)), "image/png")}),
            client.post("/add-corner-pixels", files={"image_file": ("blue.png", solid_png(BLUE, (5, 11)), "image/png")}),
        )

    red_img, blue_img = open_png(red.content), open_png(blue.content)
    assert red_img.size == (9, 6)
    assert red_img.getpixel((4, 3)) == RED
    assert blue_img.size == (5, 11)
    assert blue_img.getpixel((2, 5)) == BLUE


@pytest.mark.anyio
async def test_concurrent_process_requests_do_not_interfere():
    api = FakeSegmentationAPI()
    app = _app(api)
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(transport=transport, base_url="http://relay") as client:
        red, blue = await asyncio.gather(
            client.post("/process-image", files={"image_file": ("red.png", solid_png(RED), "image/png")}),
            client.post("/process-image", files={"image_file": ("blue.png", solid_png(BLUE), "image/png")}),
        )

    assert red.status_code == 200
    assert blue.status_code == 200
    assert api.call_count == 2
    red_pixel = open_png(red.content).convert("RGBA").getpixel((600, 650))
    blue_pixel = open_png(blue.content).convert("RGBA").getpixel((600, 650))
    assert red_pixel[0] > red_pixel[2]
    assert blue_pixel[2] > blue_pixel[0]
