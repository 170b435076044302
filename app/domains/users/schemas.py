from datetime import datetime
from typing import Optional

from pydantic import AnyUrl, Field, TypeAdapter, ValidationError, field_validator

from app.shared.utils.response import CamelModel

_url_adapter = TypeAdapter(AnyUrl)


class UserSummary(CamelModel):
    principal: str
    codename: Optional[str] = None


class UserResponse(UserSummary):
    id: int
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(CamelModel):
    codename: Optional[str] = Field(default=None, min_length=2, max_length=64)
    avatar_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("avatar_url")
    @classmethod
    def validate_avatar_url(cls, v):
        if v is None:
            return v
        try:
            _url_adapter.validate_python(v)
        except ValidationError:
            raise ValueError("avatarUrl must be a valid URL")
        return v
