from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from app.shared.utils.response import CamelModel


class ToolboxRowIn(CamelModel):
    id: Optional[int] = Field(default=None, gt=0)
    label: str = Field(..., min_length=1, max_length=120)
    content: str = Field(default="", max_length=10_000)

    @field_validator("label", "content", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip() if isinstance(v, str) else v


class ToolboxRowResponse(CamelModel):
    id: int
    label: str
    content: str
    created_at: datetime
    updated_at: datetime
