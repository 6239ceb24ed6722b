"""Uniform response envelope shared by every HTTP endpoint."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiError(BaseModel):
    code: str
    message: str


class ApiResponse(BaseModel, Generic[T]):
    """``{"success": bool, "data"?: T, "error"?: {"code", "message"}}``."""

    success: bool
    data: T | None = None
    error: ApiError | None = None

    @classmethod
    def ok(cls, data: Any = None) -> "ApiResponse[Any]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, code: str, message: str) -> "ApiResponse[Any]":
        return cls(success=False, error=ApiError(code=code, message=message))


__all__ = ["ApiError", "ApiResponse"]
