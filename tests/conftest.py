"""Shared fixtures: in-memory images and a fake segmentation API."""

import io

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from cutout_service.main import build_app
from image_relay import Settings


def make_png(size=(4, 3), mode="RGBA") -> bytes:
    """Build a PNG whose pixels all differ, so pass-through is checkable."""
    width, height = size
    img = Image.new(mode, size)
    for x in range(width):
        for y in range(height):
            value = (x * 37 + y * 11) % 200
            if mode == "RGBA":
                img.putpixel((x, y), (value, 200 - value, (x + y) % 50, 128 + value % 100))
            elif mode == "RGB":
                img.putpixel((x, y), (value, 200 - value, (x + y) % 50))
            else:
                img.putpixel((x, y), value)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def solid_png(color, size=(8, 8)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def open_png(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


class FakeSegmentationAPI:
    """
    Stand-in for the segmentation endpoint.

    Echoes the uploaded file back by default, or answers with a fixed status
    and body. Every request is recorded.
    """

    def __init__(self, status_code: int = 200, content: bytes | None = None, error: Exception | None = None):
        self.status_code = status_code
        self.content = content
        self.error = error
        self.requests: list[httpx.Request] = []
        self.bodies: list[bytes] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = await request.aread()
        self.bodies.append(body)
        if self.error is not None:
            raise self.error
        if self.status_code != 200:
            return httpx.Response(self.status_code, text=self.content.decode() if self.content else "boom")
        if self.content is not None:
            return httpx.Response(200, content=self.content, headers={"Content-Type": "image/png"})
        return httpx.Response(200, content=_extract_file(request, body), headers={"Content-Type": "image/png"})


def _extract_file(request: httpx.Request, body: bytes) -> bytes:
    """Pull the single file part out of a multipart body."""
    boundary = request.headers["Content-Type"].split("boundary=")[1].encode()
    part = body.split(b"--" + boundary)[1]
    return part.split(b"\r\n\r\n", 1)[1].rsplit(b"\r\n", 1)[0]


@pytest.fixture
def upstream():
    return FakeSegmentationAPI()


@pytest.fixture
def make_client(upstream):
    """Factory for a TestClient wired to the fake segmentation API."""

    def _make(api_key: str | None = "test-key", api: FakeSegmentationAPI | None = None) -> TestClient:
        settings = Settings(
            photoroom_api_key=api_key,
            photoroom_segment_url="https://segment.test/v1/segment",
        )
        app = build_app(settings, transport=httpx.MockTransport(api or upstream))
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()
