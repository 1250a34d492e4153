# coursehub/schemas/course_content.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from coursehub.schemas.base import CamelModel

ContentType = Literal["video", "text", "quiz"]


class CourseContentBase(CamelModel):
    course_id: int = Field(..., gt=0)
    title: str = Field(..., min_length=1, max_length=255)
    type: ContentType
    content: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0, description="Minutes")
    order: int = Field(0, ge=0)


class CourseContentCreate(CourseContentBase):
    pass


class CourseContentUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[ContentType] = None
    content: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0)
    order: Optional[int] = Field(None, ge=0)


class CourseContentResponse(CourseContentBase):
    id: int
    created_at: datetime
    updated_at: datetime
