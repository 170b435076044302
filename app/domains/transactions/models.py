import enum

from sqlalchemy import BigInteger, Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.shared.database.connection import Base


class TransactionEventType(enum.Enum):
    MINT = "MINT"
    LIST = "LIST"
    SALE = "SALE"
    BID_ACCEPTED = "BID_ACCEPTED"


class Transaction(Base):
    """Append-only audit record of a marketplace state change."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    tx_sig = Column(String(128), unique=True, nullable=False)
    event_type = Column(Enum(TransactionEventType), nullable=False)
    nft_id = Column(Integer, ForeignKey("nfts.id"), nullable=True, index=True)
    price_lamports = Column(BigInteger, nullable=True)
    from_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    to_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    block_time = Column(DateTime(timezone=True), nullable=True)
    message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    from_user = relationship("User", foreign_keys=[from_user_id])
    to_user = relationship("User", foreign_keys=[to_user_id])


class FeedEvent(Base):
    """Short-lived display entry for the live activity feed."""

    __tablename__ = "transaction_feed_events"

    id = Column(Integer, primary_key=True, index=True)
    event_code = Column(String(32), nullable=False)
    message = Column(Text, nullable=False)
    tx_sig = Column(String(128), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
