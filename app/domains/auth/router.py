from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.domains.auth import schemas
from app.domains.auth.dependencies import get_current_user
from app.domains.auth.service import AuthService
from app.domains.users.models import User
from app.domains.users.schemas import UserResponse
from app.shared.database.connection import get_db
from app.shared.utils.response import DataResponse

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/dev-login", response_model=DataResponse[schemas.LoginResponse])
def dev_login(request: schemas.DevLoginRequest, db: Session = Depends(get_db)):
    """
    Log in (creating the user if needed) with a plain handle

    **Possible errors:**
    - 400: Principal missing or not alphanumeric/dash/underscore
    - 403: Dev login disabled
    """
    auth_service = AuthService(db)
    return {"data": auth_service.dev_login(request)}


@router.post("/nonce", response_model=DataResponse[schemas.NonceResponse])
def request_nonce(request: schemas.NonceRequest, db: Session = Depends(get_db)):
    """
    Issue a one-time nonce for the wallet to sign

    The wallet must sign the returned `message` verbatim.
    """
    auth_service = AuthService(db)
    return {"data": auth_service.issue_nonce(request.wallet)}


@router.post("/wallet-login", response_model=DataResponse[schemas.LoginResponse])
def wallet_login(request: schemas.WalletLoginRequest, db: Session = Depends(get_db)):
    """
    Login with a Solana wallet signature over the nonce message

    **Possible errors:**
    - 401: Unknown/expired nonce or invalid wallet signature
    """
    auth_service = AuthService(db)
    return {"data": auth_service.wallet_login(request)}


@router.get("/me", response_model=DataResponse[UserResponse])
def get_me(current_user: User = Depends(get_current_user)):
    """
    Get current authenticated user info

    **Possible errors:**
    - 401: Invalid or expired token, missing Authorization header
    """
    return {"data": UserResponse.model_validate(current_user)}
