from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from app.domains.nfts.schemas import NftBase
from app.domains.users.schemas import UserSummary
from app.shared.lamports import LamportsStr, parse_lamports
from app.shared.utils.response import CamelModel


class CreateListingRequest(CamelModel):
    nft_id: int = Field(..., gt=0)
    price_lamports: int

    @field_validator("price_lamports", mode="before")
    @classmethod
    def parse_price(cls, v: Any) -> int:
        return parse_lamports(v)


class PlaceBidRequest(CamelModel):
    amount_lamports: int

    @field_validator("amount_lamports", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> int:
        return parse_lamports(v)


class _StatusModel(CamelModel):
    status: str

    @field_validator("status", mode="before")
    @classmethod
    def enum_value(cls, v):
        return getattr(v, "value", v)


class BidderSummary(UserSummary):
    id: int


class ListingBidResponse(CamelModel):
    id: int
    amount_lamports: LamportsStr
    bidder: BidderSummary
    created_at: datetime


class ListingResponse(_StatusModel):
    id: int
    nft_id: int
    seller_id: int
    price_lamports: LamportsStr
    created_at: datetime
    updated_at: datetime


class ListingDetailResponse(_StatusModel):
    """Active listing as shown on the marketplace board"""

    id: int
    price_lamports: LamportsStr
    created_at: datetime
    updated_at: datetime
    expires_at: Optional[datetime] = None
    nft: NftBase
    seller: UserSummary
    best_bid: Optional[ListingBidResponse] = None
    bids: List[ListingBidResponse] = []


class BidResponse(_StatusModel):
    id: int
    listing_id: int
    nft_id: int
    amount_lamports: LamportsStr
    created_at: datetime
    bidder: UserSummary
