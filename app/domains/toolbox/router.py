from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.domains.auth.dependencies import get_current_user
from app.domains.toolbox import schemas
from app.domains.toolbox.service import ToolboxService
from app.domains.users.models import User
from app.shared.database.connection import get_db
from app.shared.utils.response import DataResponse

router = APIRouter(prefix="/toolbox", tags=["toolbox"])


@router.get("", response_model=DataResponse[List[schemas.ToolboxRowResponse]])
def get_my_toolbox(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service = ToolboxService(db)
    rows = service.get_toolbox_rows(current_user.id)
    return {"data": [schemas.ToolboxRowResponse.model_validate(r) for r in rows]}


@router.put("", response_model=DataResponse[List[schemas.ToolboxRowResponse]])
def save_my_toolbox(
    payload: List[schemas.ToolboxRowIn],
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Replace the caller's toolbox rows

    **Possible errors:**
    - 400: Empty label, label over 120 or content over 10000 characters
    - 404: A row id that does not belong to the caller
    """
    service = ToolboxService(db)
    rows = service.save_toolbox_rows(current_user.id, payload)
    return {"data": [schemas.ToolboxRowResponse.model_validate(r) for r in rows]}
