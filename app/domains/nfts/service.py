import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.domains.listings.models import Bid, Listing, ListingStatus
from app.domains.nfts.models import Nft
from app.domains.transactions.models import Transaction, TransactionEventType
from app.domains.transactions.service import TransactionService
from app.domains.users.service import UserService
from app.shared.database.connection import atomic
from app.shared.errors import NotFound

logger = logging.getLogger(__name__)


class NftService:
    def __init__(self, db: Session):
        self.db = db
        self.transactions = TransactionService(db)

    def mint_nft_for_user(
        self,
        user_id: int,
        name: str,
        description: Optional[str] = None,
        image_data: Optional[str] = None,
    ) -> Nft:
        """
        Mint an NFT owned and created by the user, and log it
        """
        user = UserService(self.db).require_user(user_id)

        with atomic(self.db):
            nft = Nft(
                name=name,
                description=description,
                image_uri=image_data,
                owner_id=user.id,
                creator_id=user.id,
            )
            self.db.add(nft)
            self.db.flush()

            self.transactions.record_transaction(
                TransactionEventType.MINT,
                nft_id=nft.id,
                to_user_id=user.id,
                message=f"NFT minted: {nft.name}",
            )
            self.transactions.append_feed_event(
                "MINT", f"{user.display_name} minted {nft.name}"
            )

        self.db.refresh(nft)
        logger.info("User %s minted NFT %s", user.id, nft.id)
        return nft

    def get_nft(self, nft_id: int) -> Nft:
        nft = self.db.query(Nft).filter(Nft.id == nft_id).first()
        if nft is None:
            raise NotFound("NFT not found")
        return nft

    def get_nfts_for_owner(self, user_id: int) -> List[Nft]:
        return (
            self.db.query(Nft)
            .filter(Nft.owner_id == user_id)
            .order_by(Nft.created_at.desc(), Nft.id.desc())
            .all()
        )

    @staticmethod
    def active_listings(nft: Nft) -> List[Listing]:
        return [l for l in nft.listings if l.status == ListingStatus.ACTIVE]

    def get_nft_bids(self, nft_id: int) -> List[Bid]:
        return (
            self.db.query(Bid)
            .filter(Bid.nft_id == nft_id)
            .order_by(Bid.created_at.desc(), Bid.id.desc())
            .all()
        )

    def get_nft_transactions(self, nft_id: int) -> List[Transaction]:
        return self.transactions.get_nft_transactions(nft_id)
