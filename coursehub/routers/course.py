# coursehub/routers/course.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from coursehub.core.database import get_db
from coursehub.core.dependencies import get_current_admin
from coursehub.models.user import User
from coursehub.schemas.course import CourseCreate, CourseResponse, CourseUpdate
from coursehub.services.course import CourseService

router = APIRouter(
    prefix="/courses",
    tags=["Courses"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[CourseResponse])
def list_courses(
    category: Optional[str] = Query(None, description="Filter by category"),
    featured: Optional[bool] = Query(None, description="Filter by featured flag"),
    search: Optional[str] = Query(None, description="Search title or description"),
    db: Session = Depends(get_db),
):
    """
    Published courses, featured first.
    Available to all users (authenticated or not).
    """
    return CourseService(db).list_courses(
        category=category, featured=featured, search=search
    )


@router.get("/featured", response_model=List[CourseResponse])
def list_featured_courses(db: Session = Depends(get_db)):
    return CourseService(db).get_featured_courses()


@router.get("/{slug}", response_model=CourseResponse)
def get_course(slug: str, db: Session = Depends(get_db)):
    """Get a published course by slug"""
    return CourseService(db).get_course_by_slug(slug)


# ==================== Admin Endpoints ====================


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(
    course_in: CourseCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """
    Create a new course.
    Only admins can create courses.
    """
    return CourseService(db).create_course(course_in)


@router.patch("/{course_id:int}", response_model=CourseResponse)
def update_course(
    course_id: int,
    course_in: CourseUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """
    Update a course.
    Only admins can update courses.
    """
    return CourseService(db).update_course(course_id, course_in)


@router.delete("/{course_id:int}")
def delete_course(
    course_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """
    Delete a course together with its content and referral codes.
    Only admins can delete courses.
    """
    CourseService(db).delete_course(course_id)
    return {"success": True, "message": "Course deleted successfully"}
