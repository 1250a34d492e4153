"""
Application initialization module
Handles startup tasks such as applying configured admin roles
"""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from coursehub.core.config import settings
from coursehub.models.user import User

logger = logging.getLogger(__name__)


def init_admin_roles(db: Session) -> int:
    """
    Grant the admin role to existing users listed in ``ADMIN_EMAILS``.

    New accounts with those emails get the role when they sign up, so this
    only matters for users that existed before the setting changed.

    Returns:
        Number of users promoted
    """
    if not settings.admin_emails:
        logger.warning("No ADMIN_EMAILS configured; nobody can reach admin routes")
        return 0

    try:
        users = (
            db.query(User)
            .filter(func.lower(User.email).in_(settings.admin_emails))
            .filter(User.role != "admin")
            .all()
        )
        for user in users:
            user.role = "admin"
            logger.info(f"Granted admin role to user {user.id} ({user.email})")

        db.commit()
        return len(users)

    except Exception as e:
        logger.error(f"Failed to apply admin roles: {e}")
        db.rollback()
        raise


def initialize_application(db: Session) -> None:
    """
    Run all application initialization tasks.

    Args:
        db: Database session
    """
    logger.info("Starting application initialization...")

    promoted = init_admin_roles(db)
    logger.info(f"Admin roles applied ({promoted} promoted)")

    logger.info("Application initialization completed")
