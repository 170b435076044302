from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.domains.transactions import schemas
from app.domains.transactions.service import TransactionService
from app.shared.database.connection import get_db
from app.shared.utils.response import DataResponse

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("", response_model=DataResponse[List[schemas.FeedEventResponse]])
def get_transaction_feed(
    limit: int = Query(settings.feed_default_limit, ge=1, le=settings.feed_retention),
    db: Session = Depends(get_db),
):
    """
    Recent marketplace activity, newest first
    """
    service = TransactionService(db)
    events = service.get_feed_events(limit)
    return {"data": [schemas.FeedEventResponse.model_validate(e) for e in events]}
