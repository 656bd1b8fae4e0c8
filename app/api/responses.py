"""
app/api/responses.py

Serialisation helpers shared by the routers (no business logic).
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response

from footprint import Issue

NO_STORE_HEADERS = {"Cache-Control": "no-store"}


class RequestBodyError(ValueError):
    """
    Raised when a request body is not decodable JSON.
    """


async def read_json_body(request: Request) -> Any:
    """
    Decode the raw request body as JSON.

    Raises
    ------
    RequestBodyError
        If the body is empty, not UTF-8 or not JSON.
    """

    raw = await request.body()
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise RequestBodyError("Request body must be a JSON document.") from exc


def issues_response(
    issues: list[Issue],
    *,
    status_code: int = status.HTTP_400_BAD_REQUEST,
) -> JSONResponse:
    """Return the ``{"ok": false, "issues": [...]}`` body used for rejections."""
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "issues": [issue.to_dict() for issue in issues]},
        headers=NO_STORE_HEADERS,
    )


def single_issue_response(field: str, message: str) -> JSONResponse:
    return issues_response([Issue(field=field, message=message)])


def attachment_response(content: str | bytes, *, media_type: str, filename: str) -> Response:
    """Return *content* as a file download."""
    return Response(
        content=content,
        media_type=media_type,
        headers={
            **NO_STORE_HEADERS,
            "Content-Disposition": f'attachment; filename="{filename}"',
        },
    )
