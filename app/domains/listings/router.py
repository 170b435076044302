from typing import List

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from app.domains.auth.dependencies import get_current_user
from app.domains.listings import schemas
from app.domains.listings.models import Listing
from app.domains.listings.service import ListingService
from app.domains.nfts.schemas import NftBase
from app.domains.users.models import User
from app.domains.users.schemas import UserSummary
from app.shared.database.connection import get_db
from app.shared.utils.response import DataResponse

router = APIRouter(prefix="/listings", tags=["listings"])


def _serialize_listing(listing: Listing) -> schemas.ListingDetailResponse:
    bids = [
        schemas.ListingBidResponse.model_validate(bid)
        for bid in ListingService.active_bids(listing)
    ]
    return schemas.ListingDetailResponse(
        id=listing.id,
        price_lamports=listing.price_lamports,
        status=listing.status,
        created_at=listing.created_at,
        updated_at=listing.updated_at,
        expires_at=listing.expires_at,
        nft=NftBase.model_validate(listing.nft),
        seller=UserSummary.model_validate(listing.seller),
        best_bid=bids[0] if bids else None,
        bids=bids,
    )


@router.get("", response_model=DataResponse[List[schemas.ListingDetailResponse]])
def list_active_listings(db: Session = Depends(get_db)):
    """
    Active listings, newest first, with bids sorted highest first
    """
    service = ListingService(db)
    return {"data": [_serialize_listing(l) for l in service.get_active_listings()]}


@router.post(
    "",
    response_model=DataResponse[schemas.ListingResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_listing(
    payload: schemas.CreateListingRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List an owned NFT at a fixed price

    **Possible errors:**
    - 400: Invalid nftId or priceLamports
    - 403: Caller does not own the NFT
    - 404: NFT not found
    - 409: NFT already has an active listing
    """
    service = ListingService(db)
    listing = service.create_listing(
        nft_id=payload.nft_id,
        price_lamports=payload.price_lamports,
        seller_id=current_user.id,
    )
    return {"data": schemas.ListingResponse.model_validate(listing)}


@router.post("/{listing_id}/purchase", status_code=status.HTTP_204_NO_CONTENT)
def purchase_listing(
    listing_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Buy a listing at its asking price

    **Possible errors:**
    - 403: Seller cannot purchase their own listing
    - 404: Listing not found
    - 409: Listing already sold
    """
    service = ListingService(db)
    service.purchase_listing(listing_id, buyer_id=current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{listing_id}/bids",
    response_model=DataResponse[schemas.BidResponse],
    status_code=status.HTTP_201_CREATED,
)
def place_bid(
    payload: schemas.PlaceBidRequest,
    listing_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    **Possible errors:**
    - 400: Invalid amountLamports
    - 403: Owner cannot bid on their own listing
    - 404: Listing not found
    - 409: Listing already sold
    """
    service = ListingService(db)
    bid = service.place_bid(
        listing_id, bidder_id=current_user.id, amount_lamports=payload.amount_lamports
    )
    return {"data": schemas.BidResponse.model_validate(bid)}


@router.post(
    "/{listing_id}/bids/{bid_id}/accept", status_code=status.HTTP_204_NO_CONTENT
)
def accept_bid(
    listing_id: int = Path(..., gt=0),
    bid_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Accept one bid; the NFT moves to the bidder and competing bids are cancelled

    **Possible errors:**
    - 403: Only the seller can accept bids
    - 404: Bid not found for this listing
    - 409: Listing or bid no longer active
    """
    service = ListingService(db)
    service.accept_bid(listing_id, bid_id=bid_id, seller_id=current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
