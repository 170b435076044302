from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.domains.auth.dependencies import get_current_user
from app.domains.users import schemas
from app.domains.users.models import User
from app.domains.users.service import UserService
from app.shared.database.connection import get_db
from app.shared.utils.response import DataResponse

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=DataResponse[schemas.UserResponse])
def get_my_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_service = UserService(db)
    profile = user_service.get_or_create_profile(current_user.principal)
    return {"data": schemas.UserResponse.model_validate(profile)}


@router.put("/me", response_model=DataResponse[schemas.UserResponse])
def save_my_profile(
    payload: schemas.ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update codename and/or avatar

    **Possible errors:**
    - 400: Invalid codename length or avatar URL
    - 401: Missing or invalid token
    """
    user_service = UserService(db)
    profile = user_service.update_profile(current_user.principal, payload)
    return {"data": schemas.UserResponse.model_validate(profile)}
