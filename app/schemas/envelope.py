# app/schemas/envelope.py
from typing import Any, Literal

from pydantic import BaseModel, Field


class Envelope(BaseModel):
    """
    Uniform response wrapper returned by every catalog endpoint.
    """

    status: Literal["success", "error"]
    message: str
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def success(cls, message: str = "ok", **data: Any) -> "Envelope":
        return cls(status="success", message=message, data=data)

    @classmethod
    def error(cls, message: str, data: dict[str, Any] | None = None) -> "Envelope":
        return cls(status="error", message=message, data=data or {})
