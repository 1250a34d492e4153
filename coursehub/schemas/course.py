# coursehub/schemas/course.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from coursehub.schemas.base import CamelModel

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

# ==================== Course Schemas ====================


class CourseBase(CamelModel):
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN)
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    price: int = Field(..., ge=0, description="Price in minor units")
    original_price: Optional[int] = Field(None, ge=0)
    is_featured: bool = False
    is_published: bool = False


class CourseCreate(CourseBase):
    pass


class CourseUpdate(CamelModel):
    slug: Optional[str] = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    price: Optional[int] = Field(None, ge=0)
    original_price: Optional[int] = Field(None, ge=0)
    is_featured: Optional[bool] = None
    is_published: Optional[bool] = None


class CourseResponse(CourseBase):
    id: int
    created_at: datetime
    updated_at: datetime


class CourseSummary(CamelModel):
    id: int
    slug: str
    title: str
    image: Optional[str] = None
    price: int


class CourseListResponse(CamelModel):
    courses: List[CourseResponse]
    total: int
    page: int
    size: int
    total_pages: int
