from datetime import datetime
from typing import List, Optional

from pydantic import AnyHttpUrl, Field, TypeAdapter, ValidationError, field_validator

from app.domains.users.schemas import UserSummary
from app.shared.lamports import LamportsStr
from app.shared.utils.response import CamelModel

_http_url_adapter = TypeAdapter(AnyHttpUrl)


class MintNftRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = Field(default=None, max_length=2000)
    image_data: Optional[str] = Field(
        default=None, description="http(s) URL or data:image/... URL"
    )

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("image_data")
    @classmethod
    def validate_image_data(cls, v):
        if v is None or v.startswith("data:image/"):
            return v
        try:
            _http_url_adapter.validate_python(v)
        except ValidationError:
            raise ValueError("imageData must be a valid URL or a data:image/ URL")
        return v


class NftListingSummary(CamelModel):
    id: int
    price_lamports: LamportsStr
    status: str
    created_at: datetime

    @field_validator("status", mode="before")
    @classmethod
    def enum_value(cls, v):
        return getattr(v, "value", v)


class NftBase(CamelModel):
    id: int
    mint_address: Optional[str] = None
    name: str
    description: Optional[str] = None
    image_uri: Optional[str] = None
    metadata_uri: Optional[str] = None
    collection: Optional[str] = None
    seller_fee_basis_points: int = 0
    is_compressed: bool = False
    owner: UserSummary
    creator: UserSummary


class NftResponse(NftBase):
    """NFT with its listings"""

    created_at: datetime
    updated_at: datetime
    listings: List[NftListingSummary] = []


class NftBidResponse(CamelModel):
    id: int
    nft_id: int
    amount_lamports: LamportsStr
    status: str
    bidder: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, bid) -> "NftBidResponse":
        return cls(
            id=bid.id,
            nft_id=bid.nft_id,
            amount_lamports=bid.amount_lamports,
            status=bid.status.value,
            bidder=bid.bidder.display_name,
            created_at=bid.created_at,
            updated_at=bid.updated_at,
        )
