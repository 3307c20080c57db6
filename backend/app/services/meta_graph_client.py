from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any

import requests

from ..config import settings
from ..utils.meta_graph import extract_graph_error, graph_error_message
from .instagram_errors import GraphTransportError
from .publish_deadline import PublishDeadline

logger = logging.getLogger("uvicorn.error")


@dataclass
class GraphResponse:
    status_code: int
    payload: dict[str, Any]

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def error_message(self) -> str | None:
        return graph_error_message(self.payload)

    @property
    def error_detail(self) -> str:
        return extract_graph_error(self.payload, self.status_code)

    def text(self, name: str) -> str | None:
        value = self.payload.get(name)
        if value is None or isinstance(value, (dict, list)):
            return None
        text = str(value).strip()
        return text or None

    @property
    def success_flag(self) -> bool:
        value = self.payload.get("success")
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return value is True


@dataclass
class GraphClient:
    """HTTP capability injected into every publishing stage.

    Wraps a ``requests.Session`` so tests can swap the transport, and clamps
    each call's timeout to the caller's deadline.
    """

    session: requests.Session
    base_url: str = field(default_factory=lambda: settings.meta_graph_base_url)
    deadline: PublishDeadline = field(default_factory=PublishDeadline)
    request_timeout: float = field(
        default_factory=lambda: settings.instagram_request_timeout_seconds
    )
    upload_timeout: float = field(
        default_factory=lambda: settings.instagram_upload_timeout_seconds
    )

    def url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def get(self, path: str, *, params: dict[str, Any]) -> GraphResponse:
        return self._send("GET", path, params=params, timeout=self.request_timeout)

    def post_form(
        self,
        path: str,
        *,
        data: dict[str, Any],
        files: dict[str, Any] | None = None,
        upload: bool = False,
    ) -> GraphResponse:
        timeout = self.upload_timeout if upload else self.request_timeout
        return self._send("POST", path, data=data, files=files, timeout=timeout)

    def post_binary(
        self,
        path: str,
        *,
        body: bytes,
        headers: dict[str, str],
        params: dict[str, Any] | None = None,
    ) -> GraphResponse:
        return self._send(
            "POST",
            path,
            data=body,
            headers=headers,
            params=params,
            timeout=self.upload_timeout,
        )

    def _send(self, method: str, path: str, *, timeout: float, **kwargs: Any) -> GraphResponse:
        effective_timeout = self.deadline.timeout(timeout)
        try:
            response = self.session.request(
                method,
                self.url(path),
                timeout=effective_timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self.deadline.check()
            raise GraphTransportError(f"Graph API request timed out: {method} {path}") from exc
        except requests.RequestException as exc:
            raise GraphTransportError(f"Graph API request failed: {exc.__class__.__name__}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise GraphTransportError(
                f"Graph API returned a non-JSON body (HTTP {response.status_code})"
            ) from exc

        if not isinstance(payload, dict):
            payload = {}
        logger.debug("Graph %s %s -> HTTP %s", method, path, response.status_code)
        return GraphResponse(status_code=response.status_code, payload=payload)
