"""Uniform response envelope.

Success: ``{"success": true, "data": ...}``.
Failure: ``{"success": false, "error": {"message": ..., **extra}}``.
"""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse


def ok(data: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse({"success": True, "data": data}, status_code=status_code)


def error(message: str, status_code: int = 500, **extra: Any) -> JSONResponse:
    return JSONResponse(
        {"success": False, "error": {"message": message, **extra}},
        status_code=status_code,
    )
