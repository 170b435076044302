from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domains.users import models, schemas
from app.shared.database.connection import atomic
from app.shared.errors import NotFound


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_user_by_id(self, user_id: int) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.id == user_id).first()

    def get_user_by_principal(self, principal: str) -> Optional[models.User]:
        return (
            self.db.query(models.User)
            .filter(models.User.principal == principal)
            .first()
        )

    def require_user(self, user_id: int) -> models.User:
        user = self.get_user_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def upsert_user(
        self,
        principal: str,
        codename: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> models.User:
        """
        Create the user on first sight, otherwise apply the provided fields
        """
        try:
            with atomic(self.db):
                user = self._apply_upsert(principal, codename, avatar_url)
        except IntegrityError:
            # Lost a race with a concurrent first login for the same principal
            with atomic(self.db):
                user = self._apply_upsert(principal, codename, avatar_url)
        self.db.refresh(user)
        return user

    def _apply_upsert(
        self, principal: str, codename: Optional[str], avatar_url: Optional[str]
    ) -> models.User:
        user = self.get_user_by_principal(principal)
        if user is None:
            user = models.User(
                principal=principal,
                codename=codename or models.default_codename(principal),
                avatar_url=avatar_url,
            )
            self.db.add(user)
        else:
            if codename is not None:
                user.codename = codename
            if avatar_url is not None:
                user.avatar_url = avatar_url
        self.db.flush()
        return user

    def get_or_create_profile(self, principal: str) -> models.User:
        user = self.get_user_by_principal(principal)
        if user is not None:
            return user
        return self.upsert_user(principal)

    def update_profile(self, principal: str, payload: schemas.ProfileUpdate) -> models.User:
        """
        Apply every field present in the payload; an explicit null clears it
        """
        user = self.get_or_create_profile(principal)
        update_data = payload.model_dump(exclude_unset=True)
        with atomic(self.db):
            for field, value in update_data.items():
                setattr(user, field, value)
        self.db.refresh(user)
        return user
