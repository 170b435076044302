import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.sql import func

from app.domains.listings.models import Bid, BidStatus, Listing, ListingStatus
from app.domains.nfts.models import Nft
from app.domains.transactions.models import Transaction, TransactionEventType
from app.domains.transactions.service import TransactionService
from app.domains.users.service import UserService
from app.shared.database.connection import atomic
from app.shared.errors import Conflict, Forbidden, InvalidPayload, NotFound
from app.shared.lamports import format_sol

logger = logging.getLogger(__name__)


class ListingService:
    """
    Listing and bid state machine.

    Every mutating operation is one transaction. The contended row (the NFT
    when listing, the listing otherwise) is read with SELECT ... FOR UPDATE and
    all preconditions are re-checked after the lock is held. The ACTIVE -> SOLD
    transition is a conditional UPDATE, so a caller that still slipped through
    sees Conflict instead of a second sale. A bid claims the listing with a
    guarded UPDATE before anything else, so it cannot land on a listing that
    was sold after it was read.
    """

    def __init__(self, db: Session):
        self.db = db
        self.transactions = TransactionService(db)
        self.users = UserService(db)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_active_listings(self) -> List[Listing]:
        return (
            self.db.query(Listing)
            .options(
                selectinload(Listing.nft).selectinload(Nft.owner),
                selectinload(Listing.nft).selectinload(Nft.creator),
                selectinload(Listing.seller),
                selectinload(Listing.bids).selectinload(Bid.bidder),
            )
            .filter(Listing.status == ListingStatus.ACTIVE)
            .order_by(Listing.created_at.desc(), Listing.id.desc())
            .all()
        )

    def get_listing(self, listing_id: int) -> Listing:
        listing = self.db.query(Listing).filter(Listing.id == listing_id).first()
        if listing is None:
            raise NotFound("Listing not found")
        return listing

    @staticmethod
    def active_bids(listing: Listing) -> List[Bid]:
        """ACTIVE bids, highest first; equal amounts keep bid order."""
        bids = [b for b in listing.bids if b.status == BidStatus.ACTIVE]
        return sorted(bids, key=lambda b: (-b.amount_lamports, b.id))

    # ------------------------------------------------------------------
    # Helpers (run inside an open transaction)
    # ------------------------------------------------------------------
    def _lock_listing(self, listing_id: int) -> Optional[Listing]:
        return (
            self.db.query(Listing)
            .filter(Listing.id == listing_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def _close_listing(self, listing: Listing) -> None:
        updated = (
            self.db.query(Listing)
            .filter(Listing.id == listing.id, Listing.status == ListingStatus.ACTIVE)
            .update({Listing.status: ListingStatus.SOLD}, synchronize_session="evaluate")
        )
        if updated != 1:
            raise Conflict("Listing is not active")

    def _claim_active_listing(self, listing_id: int) -> None:
        """
        Touch the listing while it is still ACTIVE so the rest of the unit of
        work holds its write lock; a sale can no longer commit underneath.
        """
        touched = (
            self.db.query(Listing)
            .filter(Listing.id == listing_id, Listing.status == ListingStatus.ACTIVE)
            .update({Listing.updated_at: func.now()}, synchronize_session=False)
        )
        if touched != 1:
            if self.db.query(Listing.id).filter(Listing.id == listing_id).first() is None:
                raise NotFound("Listing not found")
            raise Conflict("Listing not available")

    def _cancel_active_bids(self, listing_id: int, except_bid_id: Optional[int] = None) -> int:
        query = self.db.query(Bid).filter(
            Bid.listing_id == listing_id, Bid.status == BidStatus.ACTIVE
        )
        if except_bid_id is not None:
            query = query.filter(Bid.id != except_bid_id)
        return query.update({Bid.status: BidStatus.CANCELLED}, synchronize_session="evaluate")

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def create_listing(self, nft_id: int, price_lamports: int, seller_id: int) -> Listing:
        """
        List an NFT for sale at a fixed price

        **Raises:**
        - NotFound: NFT does not exist
        - Forbidden: seller is not the current owner
        - Conflict: the NFT already has an active listing
        """
        if price_lamports <= 0:
            raise InvalidPayload("Price must be greater than zero")

        with atomic(self.db):
            nft = (
                self.db.query(Nft)
                .filter(Nft.id == nft_id)
                .with_for_update()
                .populate_existing()
                .first()
            )
            if nft is None:
                raise NotFound("NFT not found")

            if nft.owner_id != seller_id:
                logger.warning("User %s tried to list NFT %s owned by %s", seller_id, nft.id, nft.owner_id)
                raise Forbidden("Only the owner can list this NFT")

            existing = (
                self.db.query(Listing.id)
                .filter(Listing.nft_id == nft.id, Listing.status == ListingStatus.ACTIVE)
                .first()
            )
            if existing:
                raise Conflict("NFT already has an active listing")

            listing = Listing(
                nft_id=nft.id,
                seller_id=seller_id,
                price_lamports=price_lamports,
                status=ListingStatus.ACTIVE,
            )
            self.db.add(listing)
            try:
                self.db.flush()
            except IntegrityError:
                raise Conflict("NFT already has an active listing")

            self.transactions.record_transaction(
                TransactionEventType.LIST,
                nft_id=nft.id,
                price_lamports=price_lamports,
                from_user_id=nft.owner_id,
                message=f"Listing created for {nft.name}",
            )
            self.transactions.append_feed_event(
                "LIST", f"Asset {nft.name} listed by {nft.owner.display_name}"
            )

        self.db.refresh(listing)
        logger.info("Listing %s created for NFT %s at %s lamports", listing.id, nft_id, price_lamports)
        return listing

    def purchase_listing(self, listing_id: int, buyer_id: int) -> Transaction:
        """
        Buy a listing outright at its asking price

        **Raises:**
        - NotFound: listing does not exist
        - Conflict: listing is no longer active
        - Forbidden: buyer is the seller
        """
        with atomic(self.db):
            listing = self._lock_listing(listing_id)
            if listing is None:
                raise NotFound("Listing not found")
            if listing.status != ListingStatus.ACTIVE:
                raise Conflict("Listing not available")
            if listing.seller_id == buyer_id:
                raise Forbidden("Seller cannot purchase their own listing")

            self._close_listing(listing)
            nft = listing.nft
            nft.owner_id = buyer_id
            cancelled = self._cancel_active_bids(listing.id)

            transaction = self.transactions.record_transaction(
                TransactionEventType.SALE,
                nft_id=nft.id,
                price_lamports=listing.price_lamports,
                from_user_id=listing.seller_id,
                to_user_id=buyer_id,
                message=f"Sale executed for {nft.name}",
            )
            self.transactions.append_feed_event(
                "SALE",
                f"{listing.seller.display_name} sold {nft.name}",
                tx_sig=transaction.tx_sig,
            )

        logger.info(
            "Listing %s sold to user %s (%d open bids cancelled)", listing_id, buyer_id, cancelled
        )
        return transaction

    def place_bid(self, listing_id: int, bidder_id: int, amount_lamports: int) -> Bid:
        """
        Bid on an active listing. Any positive amount is accepted; there is no
        minimum increment and no floor relative to the asking price.

        **Raises:**
        - NotFound: listing or bidder does not exist
        - Conflict: listing is no longer active
        - Forbidden: bidder currently owns the NFT
        """
        if amount_lamports <= 0:
            raise InvalidPayload("Bid amount must be greater than zero")

        with atomic(self.db):
            bidder = self.users.require_user(bidder_id)
            self._claim_active_listing(listing_id)
            listing = self._lock_listing(listing_id)
            if listing.nft.owner_id == bidder_id:
                raise Forbidden("Owner cannot bid on their own listing")

            bid = Bid(
                listing_id=listing.id,
                nft_id=listing.nft_id,
                bidder_id=bidder_id,
                amount_lamports=amount_lamports,
                status=BidStatus.ACTIVE,
            )
            self.db.add(bid)
            self.db.flush()

            self.transactions.append_feed_event(
                "BID", f"{bidder.display_name} bid {format_sol(amount_lamports)} SOL"
            )

        self.db.refresh(bid)
        return bid

    def accept_bid(self, listing_id: int, bid_id: int, seller_id: int) -> Transaction:
        """
        Sell to one bidder: the bid is accepted, every other open bid cancelled

        **Raises:**
        - NotFound: bid missing or not placed on this listing
        - Forbidden: caller is not the seller
        - Conflict: listing or bid is no longer active
        """
        with atomic(self.db):
            bid = self.db.query(Bid).filter(Bid.id == bid_id).populate_existing().first()
            if bid is None or bid.listing_id != listing_id:
                raise NotFound("Bid not found for this listing")

            listing = self._lock_listing(listing_id)
            if listing is None:
                raise NotFound("Bid not found for this listing")
            if listing.seller_id != seller_id:
                logger.warning("User %s tried to accept bid %s on listing %s", seller_id, bid_id, listing_id)
                raise Forbidden("Only the seller can accept bids")
            if listing.status != ListingStatus.ACTIVE:
                raise Conflict("Listing is not active")
            if bid.status != BidStatus.ACTIVE:
                raise Conflict("Bid is no longer active")

            self._close_listing(listing)
            bid.status = BidStatus.ACCEPTED
            bid.accepted_at = datetime.now(timezone.utc)
            nft = listing.nft
            nft.owner_id = bid.bidder_id
            cancelled = self._cancel_active_bids(listing.id, except_bid_id=bid.id)

            transaction = self.transactions.record_transaction(
                TransactionEventType.BID_ACCEPTED,
                nft_id=nft.id,
                price_lamports=bid.amount_lamports,
                from_user_id=seller_id,
                to_user_id=bid.bidder_id,
                message=f"Bid accepted for {nft.name}",
            )
            self.transactions.append_feed_event(
                "BID_ACCEPTED",
                f"{listing.seller.display_name} accepted bid on {nft.name}",
                tx_sig=transaction.tx_sig,
            )

        logger.info(
            "Bid %s accepted on listing %s (%d competing bids cancelled)", bid_id, listing_id, cancelled
        )
        return transaction
