# coursehub/services/profile_store.py
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.orm import Session

from coursehub.models.user import User


class ProfileStore(ABC):
    """Where user profiles live. Auth flows only go through this interface."""

    @abstractmethod
    def get_by_id(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_by_uid(self, uid: str) -> Optional[User]: ...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def create(self, **fields) -> User: ...

    @abstractmethod
    def update(self, user: User, **fields) -> User: ...


class SQLProfileStore(ProfileStore):
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_uid(self, uid: str) -> Optional[User]:
        return self.db.query(User).filter(User.uid == uid).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def create(self, **fields) -> User:
        user = User(**fields)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update(self, user: User, **fields) -> User:
        for field, value in fields.items():
            setattr(user, field, value)
        self.db.commit()
        self.db.refresh(user)
        return user
