from __future__ import annotations

from typing import Any


def graph_error_object(payload: Any) -> dict[str, Any]:
    """Return the ``error`` object of a Graph API body, or an empty dict."""
    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, dict):
            return err
    return {}


def graph_error_message(payload: Any) -> str | None:
    """Return the platform's own error message verbatim, if there is one."""
    message = graph_error_object(payload).get("message")
    if isinstance(message, str) and message.strip():
        return message
    return None


def extract_graph_error(payload: Any, status_code: int) -> str:
    """Build a readable diagnostic (message, code, subcode, fbtrace) for logs."""
    err = graph_error_object(payload)
    message = str(err.get("message") or "").strip()
    code = err.get("code")
    subcode = err.get("error_subcode")
    fbtrace = err.get("fbtrace_id")
    parts: list[str] = []
    if message:
        parts.append(message)
    if code is not None:
        parts.append(f"code={code}")
    if subcode is not None:
        parts.append(f"subcode={subcode}")
    if fbtrace:
        parts.append(f"fbtrace={fbtrace}")
    if parts:
        return " | ".join(parts)
    return f"HTTP {status_code}"
