from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.shared.database.connection import Base


class Nft(Base):
    __tablename__ = "nfts"

    id = Column(Integer, primary_key=True, index=True)
    mint_address = Column(String(128), unique=True, nullable=True)  # on-chain mint, if any
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    image_uri = Column(Text, nullable=True)  # http(s) URL or data:image/... URL
    metadata_uri = Column(String(500), nullable=True)
    collection = Column(String(128), nullable=True)
    seller_fee_basis_points = Column(Integer, nullable=False, default=0)
    is_compressed = Column(Boolean, nullable=False, default=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    owner = relationship("User", back_populates="owned_nfts", foreign_keys=[owner_id])
    creator = relationship("User", foreign_keys=[creator_id])
    listings = relationship("Listing", back_populates="nft", order_by="Listing.created_at.desc()")
