# coursehub/models/course.py
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from coursehub.core.database import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)

    # Basic Info
    slug = Column(String(255), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    image = Column(Text, nullable=True)
    category = Column(String(100), nullable=True, index=True)

    # Pricing, in minor currency units (paise)
    price = Column(Integer, nullable=False, default=0)
    original_price = Column(Integer, nullable=True)

    # Catalog flags
    is_featured = Column(Boolean, default=False, nullable=False)
    is_published = Column(Boolean, default=False, nullable=False)

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

    def __repr__(self):
        return f"<Course(id={self.id}, slug='{self.slug}', price={self.price})>"
