"""The JSON error body every failing endpoint returns.

Routers put it in ``HTTPException.detail`` and the app-level handlers pass it
through unchanged, so clients always see ``{"error": {"code", "message"}}``.
"""
from typing import Any


def error_response(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build the payload; ``details`` is only included when non-empty."""

    body: dict[str, Any] = {"code": code, "message": message}
    if details:
        body["details"] = details
    return {"error": body}
