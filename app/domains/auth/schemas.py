from typing import Optional

from pydantic import Field, field_validator

from app.domains.users.schemas import UserResponse
from app.shared.utils.response import CamelModel


class DevLoginRequest(CamelModel):
    principal: str = Field(..., min_length=3, max_length=128, pattern=r"^[A-Za-z0-9_-]+$")
    codename: Optional[str] = Field(default=None, min_length=2, max_length=64)

    @field_validator("principal", "codename", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip() if isinstance(v, str) else v


class NonceRequest(CamelModel):
    wallet: str = Field(..., min_length=32, max_length=44)


class NonceResponse(CamelModel):
    nonce: str
    message: str


class WalletLoginRequest(CamelModel):
    wallet: str = Field(..., min_length=32, max_length=44)
    nonce: str = Field(..., min_length=1, max_length=64)
    signature: str = Field(..., min_length=1, description="base64 encoded ed25519 signature")


class TokenData(CamelModel):
    user_id: Optional[int] = None
    principal: Optional[str] = None


class LoginResponse(CamelModel):
    token: str
    user: UserResponse
    expires_in: int
