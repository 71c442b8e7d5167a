"""Response envelope shared by every endpoint."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """Successful response: ``{"success": true, "data": ...}``."""

    success: bool = True
    data: DataT


class CountRead(BaseModel):
    count: int


__all__ = ["ApiResponse", "CountRead"]
