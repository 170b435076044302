import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.domains.auth.dependencies import get_current_user
from app.domains.listings.models import Listing
from app.domains.nfts import schemas
from app.domains.nfts.models import Nft
from app.domains.nfts.service import NftService
from app.domains.transactions.schemas import TransactionResponse
from app.domains.users.models import User
from app.shared.database.connection import get_db
from app.shared.utils.response import DataResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/nfts", tags=["NFTs"])


def _serialize(nft: Nft, listings: Optional[List[Listing]] = None) -> schemas.NftResponse:
    response = schemas.NftResponse.model_validate(nft)
    if listings is not None:
        response.listings = [schemas.NftListingSummary.model_validate(l) for l in listings]
    return response


@router.get("/mine", response_model=DataResponse[List[schemas.NftResponse]])
def get_my_nfts(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    NFTs the caller currently owns, with their active listings
    """
    service = NftService(db)
    return {
        "data": [
            _serialize(nft, service.active_listings(nft))
            for nft in service.get_nfts_for_owner(current_user.id)
        ]
    }


@router.post(
    "",
    response_model=DataResponse[schemas.NftResponse],
    status_code=status.HTTP_201_CREATED,
)
def mint_nft(
    payload: schemas.MintNftRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Mint an NFT owned by the caller

    **Possible errors:**
    - 400: Missing name, or imageData not a URL / data:image URL
    - 401: Missing or invalid token
    """
    service = NftService(db)
    nft = service.mint_nft_for_user(
        current_user.id,
        name=payload.name,
        description=payload.description,
        image_data=payload.image_data,
    )
    return {"data": _serialize(nft)}


@router.get("/{nft_id}", response_model=DataResponse[schemas.NftResponse])
def get_nft_details(nft_id: int = Path(..., gt=0), db: Session = Depends(get_db)):
    """
    **Possible errors:**
    - 404: NFT not found
    """
    service = NftService(db)
    return {"data": _serialize(service.get_nft(nft_id))}


@router.get("/{nft_id}/bids", response_model=DataResponse[List[schemas.NftBidResponse]])
def get_nft_bids(nft_id: int = Path(..., gt=0), db: Session = Depends(get_db)):
    service = NftService(db)
    return {"data": [schemas.NftBidResponse.from_model(b) for b in service.get_nft_bids(nft_id)]}


@router.get("/{nft_id}/transactions", response_model=DataResponse[List[TransactionResponse]])
def get_nft_transactions(nft_id: int = Path(..., gt=0), db: Session = Depends(get_db)):
    service = NftService(db)
    return {
        "data": [
            TransactionResponse.from_model(tx) for tx in service.get_nft_transactions(nft_id)
        ]
    }
