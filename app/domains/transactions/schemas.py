from datetime import datetime
from typing import Optional

from pydantic import Field

from app.shared.lamports import LamportsStr
from app.shared.utils.response import CamelModel


class FeedEventResponse(CamelModel):
    id: int
    event_code: str
    message: str
    tx_sig: Optional[str] = None
    created_at: datetime


class TransactionResponse(CamelModel):
    """Audit record as shown on an NFT's history tab"""

    id: int
    tx_sig: str
    event_type: str
    price_lamports: Optional[LamportsStr] = None
    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    timestamp: datetime
    message: Optional[str] = None

    @classmethod
    def from_model(cls, tx) -> "TransactionResponse":
        return cls(
            id=tx.id,
            tx_sig=tx.tx_sig,
            event_type=tx.event_type.value,
            price_lamports=tx.price_lamports,
            from_=tx.from_user.display_name if tx.from_user else None,
            to=tx.to_user.display_name if tx.to_user else None,
            timestamp=tx.created_at,
            message=tx.message,
        )
