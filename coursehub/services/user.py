# coursehub/services/user.py
import logging
import math
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from coursehub.core.exceptions import InvalidInputError, NotFoundError
from coursehub.models.user import User
from coursehub.schemas.user import AdminUserUpdate, ProfileUpdate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    def get_users(
        self,
        page: int = 1,
        size: int = 20,
        search: Optional[str] = None,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Tuple[List[User], dict]:
        """Admin listing with filters and pagination"""
        query = self.db.query(User)

        if role is not None:
            query = query.filter(User.role == role)

        if is_active is not None:
            query = query.filter(User.is_active == is_active)

        # Search by name or email
        if search:
            search_pattern = f"%{search}%"
            query = query.filter(
                or_(User.full_name.ilike(search_pattern), User.email.ilike(search_pattern))
            )

        total = query.count()

        offset = (page - 1) * size
        users = (
            query.order_by(User.created_at.desc(), User.id.desc())
            .offset(offset)
            .limit(size)
            .all()
        )

        total_pages = math.ceil(total / size) if size > 0 else 0
        pagination = {
            "total": total,
            "page": page,
            "size": size,
            "total_pages": total_pages,
        }

        return users, pagination

    def update_profile(self, user: User, data: ProfileUpdate) -> User:
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)
        return user

    def admin_update_user(
        self, user_id: int, data: AdminUserUpdate, acting_admin: User
    ) -> User:
        user = self.get_user(user_id)
        changes = data.model_dump(exclude_unset=True)

        # An admin locking themselves out leaves nobody to undo it
        if user.id == acting_admin.id and (
            changes.get("is_active") is False
            or ("role" in changes and changes["role"] != "admin")
        ):
            raise InvalidInputError("You cannot demote or deactivate yourself")

        for field, value in changes.items():
            setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Admin {acting_admin.id} updated user {user.id}: {changes}")
        return user
