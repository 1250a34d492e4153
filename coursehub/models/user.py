from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from coursehub.core.database import Base


class User(Base):
    __tablename__ = "users"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    # Identity
    uid = Column(String(128), unique=True, nullable=False, index=True)  # External id
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=True)  # Local accounts only
    provider = Column(String(50), nullable=False, default="local")
    email_verified = Column(Boolean, default=False, nullable=False)

    # Profile information
    full_name = Column(String(150), nullable=False, default="")
    photo_url = Column(Text, nullable=True)
    phone_number = Column(String(20), nullable=True)

    # Account status
    role = Column(String(20), default="student", nullable=False)  # student, instructor, admin
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    last_login = Column(DateTime(timezone=True), nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self):
        return f"<User(id={self.id}, uid='{self.uid}', email='{self.email}', role='{self.role}')>"
