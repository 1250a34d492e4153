from .admin import router as admin_router
from .analytics import router as analytics_router
from .auth import router as auth_router
from .course import router as course_router
from .course_content import router as course_content_router
from .payment import router as payment_router
from .referral import router as referral_router
from .user import router as user_router
from .user_course import router as user_course_router

routes = [
    admin_router,
    auth_router,
    user_router,
    course_content_router,
    course_router,
    payment_router,
    referral_router,
    user_course_router,
    analytics_router,
]
