"""Shared fixtures: a scripted stand-in for ``requests.Session`` and sample media."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any

import pytest
import requests

from app.config import settings
from app.services.media_probe import encode_data_uri

GRAPH = "https://graph.facebook.com/v20.0"

# 1x1 transparent PNG
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01"
    b"\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"
    b"\x00\x00\x00\nIDATx\x9cc\x00\x01\x00\x00\x05\x00\x01"
    b"\r\n\xb4\x00\x00\x00\x00IEND\xaeB`\x82"
)
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01" + b"\x00" * 64 + b"\xff\xd9"
MP4_BYTES = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom" + b"\x00" * 128


def graph_response(status_code: int = 200, payload: Any = None, *, text: str | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    if text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = json.dumps(payload if payload is not None else {}).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    response.encoding = "utf-8"
    return response


@dataclass
class RecordedCall:
    method: str
    url: str
    kwargs: dict[str, Any]

    @property
    def data(self) -> Any:
        return self.kwargs.get("data")

    @property
    def params(self) -> dict[str, Any]:
        return self.kwargs.get("params") or {}

    @property
    def headers(self) -> dict[str, str]:
        return self.kwargs.get("headers") or {}


@dataclass
class FakeGraphSession:
    """Replays scripted responses in order and records every request."""

    responses: list[Any] = field(default_factory=list)
    calls: list[RecordedCall] = field(default_factory=list)

    def queue(self, *responses: Any) -> "FakeGraphSession":
        self.responses.extend(responses)
        return self

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append(RecordedCall(method=method, url=url, kwargs=kwargs))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        pass

    def calls_to(self, method: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.method == method]


@pytest.fixture
def graph_session() -> FakeGraphSession:
    return FakeGraphSession()


@pytest.fixture
def png_data_uri() -> str:
    return encode_data_uri(PNG_BYTES, "image/png")


@pytest.fixture
def mp4_data_uri() -> str:
    return encode_data_uri(MP4_BYTES, "video/mp4")


@pytest.fixture(autouse=True)
def graph_settings(monkeypatch):
    """Pin settings that tests rely on, whatever the local .env says."""
    monkeypatch.setattr(settings, "meta_graph_host", "graph.facebook.com")
    monkeypatch.setattr(settings, "meta_graph_api_version", "v20.0")
    monkeypatch.setattr(settings, "meta_app_id", None)
    monkeypatch.setattr(settings, "instagram_image_upload_strategy", "two_phase")
    monkeypatch.setattr(settings, "instagram_video_upload_strategy", "two_phase")
    monkeypatch.setattr(settings, "instagram_video_media_type", "REELS")
    monkeypatch.setattr(settings, "instagram_publish_poll_interval_seconds", 5)
    monkeypatch.setattr(settings, "instagram_publish_max_polls", 20)
    monkeypatch.setattr(settings, "instagram_access_token", None)
    monkeypatch.setattr(settings, "instagram_business_account_id", None)
    monkeypatch.setattr(settings, "instagram_publish_deadline_seconds", 0)
    return settings
