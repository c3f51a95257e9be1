from __future__ import annotations

from typing import Any, Optional

from rest_framework.response import Response


def ok(data: Any = None, message: Optional[str] = None, *, status: int = 200) -> Response:
    """
    Standard success wrapper:
    {
      "success": true,
      "message": "..." (optional),
      "data": ...
    }
    """
    payload: dict[str, Any] = {'success': True}
    if message:
        payload['message'] = message
    payload['data'] = data
    return Response(payload, status=status)


def err(message: str = 'Something went wrong', *, status: int = 400, errors: Optional[list] = None) -> Response:
    """
    Standard error wrapper:
    {
      "success": false,
      "message": "...",
      "errors": [{"field": ..., "message": ...}] (optional)
    }
    """
    payload: dict[str, Any] = {'success': False, 'message': message}
    if errors:
        payload['errors'] = errors
    return Response(payload, status=status)
