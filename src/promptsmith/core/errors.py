from __future__ import annotations

from fastapi import HTTPException


def bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=400, detail=detail)


def internal_error(detail: str = "Internal server error") -> HTTPException:
    return HTTPException(status_code=500, detail=detail)
