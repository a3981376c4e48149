# modules/common/http.py
from __future__ import annotations

import os

from flask import jsonify, request

SHOW_ERRS = os.getenv("SHOW_API_ERRORS", "0") == "1"


def api_error(msg: str, status: int, exc: Exception | None = None):
    """{"ok": false, "error": msg} with `status`; exception text appended when SHOW_API_ERRORS=1."""
    if exc is not None and SHOW_ERRS:
        msg += f" :: {exc.__class__.__name__}: {exc}"
    return jsonify({"ok": False, "error": msg}), status


def json_body() -> dict:
    """Request JSON as a dict; missing, malformed or non-object bodies read as {}."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def str_field(payload: dict, key: str) -> str:
    """Stripped string value of `key`; non-strings read as ""."""
    val = payload.get(key)
    return val.strip() if isinstance(val, str) else ""
