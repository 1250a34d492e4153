"""
Models package initialization
Import all models and setup relationships
"""

from .course import Course
from .course_content import CourseContent
from .event import Event, PageView
from .payment import Payment
from .referral import Referral

# Import and setup relationships
from .relations import setup_relationships
from .user import User
from .user_course import UserCourse

# Setup all relationships after models are imported
setup_relationships()

# Make models available at package level
__all__ = [
    "Course",
    "CourseContent",
    "Event",
    "PageView",
    "Payment",
    "Referral",
    "User",
    "UserCourse",
]
