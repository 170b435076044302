from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.domains.auth.service import AuthService
from app.domains.users.models import User
from app.shared.database.connection import get_db
from app.shared.errors import Unauthorized

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the bearer token to a user, 401 otherwise
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Missing authorization bearer token")
    return AuthService(db).get_current_user(credentials.credentials)
