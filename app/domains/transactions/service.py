import logging
import secrets
import string
import time
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.domains.transactions.models import FeedEvent, Transaction, TransactionEventType

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def generate_local_tx_sig() -> str:
    """Signature-like id for events that were not settled on chain."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"local-{int(time.time() * 1000)}-{suffix}"


class TransactionService:
    """
    Audit log and live feed writer.

    Writes join the caller's session; committing is left to the enclosing
    unit of work so a failed operation leaves no audit trail behind.
    """

    def __init__(self, db: Session):
        self.db = db

    def record_transaction(
        self,
        event_type: TransactionEventType,
        nft_id: Optional[int] = None,
        price_lamports: Optional[int] = None,
        from_user_id: Optional[int] = None,
        to_user_id: Optional[int] = None,
        message: Optional[str] = None,
        tx_sig: Optional[str] = None,
    ) -> Transaction:
        transaction = Transaction(
            tx_sig=tx_sig or generate_local_tx_sig(),
            event_type=event_type,
            nft_id=nft_id,
            price_lamports=price_lamports,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            block_time=datetime.now(timezone.utc),
            message=message,
        )
        self.db.add(transaction)
        self.db.flush()
        return transaction

    def append_feed_event(
        self, event_code: str, message: str, tx_sig: Optional[str] = None
    ) -> FeedEvent:
        event = FeedEvent(event_code=event_code, message=message, tx_sig=tx_sig)
        self.db.add(event)
        self.db.flush()
        self.prune_feed()
        return event

    def prune_feed(self, retention: Optional[int] = None) -> int:
        """Delete the oldest feed rows beyond the retention cap. Returns rows removed."""
        cap = retention if retention is not None else settings.feed_retention
        count = self.db.query(FeedEvent).count()
        if count <= cap:
            return 0

        excess_ids = [
            row.id
            for row in self.db.query(FeedEvent.id)
            .order_by(FeedEvent.created_at.asc(), FeedEvent.id.asc())
            .limit(count - cap)
            .all()
        ]
        if excess_ids:
            self.db.query(FeedEvent).filter(FeedEvent.id.in_(excess_ids)).delete(
                synchronize_session=False
            )
            logger.debug("Pruned %d feed events", len(excess_ids))
        return len(excess_ids)

    def get_feed_events(self, limit: Optional[int] = None) -> List[FeedEvent]:
        return (
            self.db.query(FeedEvent)
            .order_by(FeedEvent.created_at.desc(), FeedEvent.id.desc())
            .limit(limit if limit is not None else settings.feed_default_limit)
            .all()
        )

    def get_nft_transactions(self, nft_id: int) -> List[Transaction]:
        return (
            self.db.query(Transaction)
            .filter(Transaction.nft_id == nft_id)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .all()
        )
