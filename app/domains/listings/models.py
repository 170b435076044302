import enum

from sqlalchemy import BigInteger, Column, DateTime, Enum, ForeignKey, Index, Integer, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.shared.database.connection import Base


class ListingStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    SOLD = "SOLD"
    CANCELLED = "CANCELLED"  # reserved, no code path withdraws a listing


class BidStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    ACCEPTED = "ACCEPTED"
    CANCELLED = "CANCELLED"


class Listing(Base):
    __tablename__ = "listings"
    __table_args__ = (
        # At most one ACTIVE listing per NFT
        Index(
            "uq_listings_active_nft",
            "nft_id",
            unique=True,
            postgresql_where=text("status = 'ACTIVE'"),
            sqlite_where=text("status = 'ACTIVE'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    nft_id = Column(Integer, ForeignKey("nfts.id"), nullable=False, index=True)
    seller_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    price_lamports = Column(BigInteger, nullable=False)
    status = Column(Enum(ListingStatus), nullable=False, default=ListingStatus.ACTIVE)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    nft = relationship("Nft", back_populates="listings")
    seller = relationship("User")
    bids = relationship("Bid", back_populates="listing", order_by="Bid.id")


class Bid(Base):
    __tablename__ = "bids"

    id = Column(Integer, primary_key=True, index=True)
    listing_id = Column(Integer, ForeignKey("listings.id"), nullable=False, index=True)
    nft_id = Column(Integer, ForeignKey("nfts.id"), nullable=False, index=True)
    bidder_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    amount_lamports = Column(BigInteger, nullable=False)
    status = Column(Enum(BidStatus), nullable=False, default=BidStatus.ACTIVE)
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    listing = relationship("Listing", back_populates="bids")
    bidder = relationship("User")
