# coursehub/routers/course_content.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.core.database import get_db
from coursehub.core.dependencies import get_current_admin
from coursehub.models.user import User
from coursehub.schemas.course_content import (
    CourseContentCreate,
    CourseContentResponse,
    CourseContentUpdate,
)
from coursehub.services.course_content import CourseContentService

router = APIRouter(prefix="/courses", tags=["Course Content"])


@router.get("/content/{content_id:int}", response_model=CourseContentResponse)
def get_content(content_id: int, db: Session = Depends(get_db)):
    return CourseContentService(db).get_content(content_id)


@router.get("/{course_id:int}/content", response_model=List[CourseContentResponse])
def get_course_content(course_id: int, db: Session = Depends(get_db)):
    """Content items of a course, ordered by position"""
    return CourseContentService(db).get_course_content(course_id)


@router.post(
    "/content",
    response_model=CourseContentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_content(
    content_in: CourseContentCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return CourseContentService(db).create_content(content_in)


@router.patch("/content/{content_id:int}", response_model=CourseContentResponse)
def update_content(
    content_id: int,
    content_in: CourseContentUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return CourseContentService(db).update_content(content_id, content_in)


@router.delete("/content/{content_id:int}")
def delete_content(
    content_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    CourseContentService(db).delete_content(content_id)
    return {"success": True}
