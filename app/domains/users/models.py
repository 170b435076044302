from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.shared.database.connection import Base


def default_codename(principal: str) -> str:
    return f"AGENT-{principal[-4:].upper()}"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Wallet address or dev-assigned handle
    principal = Column(String(128), unique=True, index=True, nullable=False)
    codename = Column(String(64), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    owned_nfts = relationship("Nft", back_populates="owner", foreign_keys="Nft.owner_id")
    toolbox_rows = relationship("ToolboxRow", back_populates="user")

    @property
    def display_name(self) -> str:
        return self.codename or self.principal
