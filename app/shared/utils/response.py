from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class DataResponse(BaseModel, Generic[T]):
    data: T


class ErrorResponse(BaseModel):
    status: str = "error"
    message: str
    issues: Optional[Any] = None
