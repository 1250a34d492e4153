import logging
from functools import wraps

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from coursehub.core.config import settings
from coursehub.core.exceptions import ConflictError, ServiceError

logger = logging.getLogger(__name__)


class DBException(ServiceError):
    status_code = 400
    default_message = "Database error occurred"


def _rollback(args) -> None:
    # Service methods carry their session on ``self.db``
    db = getattr(args[0], "db", None) if args else None
    if db is not None:
        db.rollback()


def db_exception(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except IntegrityError:
            # Mostly duplicate unique keys
            _rollback(args)
            raise ConflictError("Duplicate entry: already exists")
        except SQLAlchemyError:
            logger.error(f"Database error in {func.__name__}", exc_info=True)
            _rollback(args)
            raise DBException("Database error occurred", 500)

    return wrapper


# Transient failures only: lock timeouts, dropped connections, serialization
retry_transient = retry(
    retry=retry_if_exception_type(OperationalError),
    stop=stop_after_attempt(settings.enrollment_retry_attempts),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
