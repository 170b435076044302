import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.core.config import settings
from app.domains.auth import schemas
from app.domains.auth.nonce_store import build_nonce_message, consume_nonce, create_nonce_for_wallet
from app.domains.auth.signature import verify_wallet_signature
from app.domains.users.models import User
from app.domains.users.schemas import UserResponse
from app.domains.users.service import UserService
from app.shared.errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.user_service = UserService(db)

    def create_access_token(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create JWT access token
        """
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
        )
        to_encode = {
            "sub": str(user.id),
            "principal": user.principal,
            "codename": user.codename,
            "exp": expire,
        }
        return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)

    def verify_token(self, token: str) -> schemas.TokenData:
        """
        Verify JWT token and return token data
        """
        try:
            payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
            subject = payload.get("sub")
            if subject is None:
                raise Unauthorized("Invalid or expired token")
            return schemas.TokenData(user_id=int(subject), principal=payload.get("principal"))
        except (JWTError, ValueError):
            raise Unauthorized("Invalid or expired token")

    def get_current_user(self, token: str) -> User:
        token_data = self.verify_token(token)
        user = self.user_service.get_user_by_id(token_data.user_id)
        if user is None:
            raise Unauthorized("User not found")
        return user

    def _login_response(self, user: User) -> schemas.LoginResponse:
        return schemas.LoginResponse(
            token=self.create_access_token(user),
            user=UserResponse.model_validate(user),
            expires_in=settings.access_token_expire_minutes * 60,
        )

    def dev_login(self, request: schemas.DevLoginRequest) -> schemas.LoginResponse:
        """
        Log in by handle alone; only meant for local development
        """
        if not settings.dev_login_enabled:
            raise Forbidden("Dev login is disabled")

        principal = request.principal.lower()
        user = self.user_service.upsert_user(principal, codename=request.codename)
        logger.info("Dev login for %s", principal)
        return self._login_response(user)

    def issue_nonce(self, wallet: str) -> schemas.NonceResponse:
        return schemas.NonceResponse(**create_nonce_for_wallet(wallet))

    def wallet_login(self, request: schemas.WalletLoginRequest) -> schemas.LoginResponse:
        """
        Log in with a signed nonce from a Solana wallet
        """
        if not consume_nonce(request.wallet, request.nonce):
            raise Unauthorized("Invalid or expired nonce")

        if not verify_wallet_signature(
            request.wallet, build_nonce_message(request.nonce), request.signature
        ):
            raise Unauthorized("Invalid wallet signature")

        user = self.user_service.upsert_user(request.wallet)
        logger.info("Wallet login for %s", request.wallet)
        return self._login_response(user)
