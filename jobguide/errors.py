"""Domain error taxonomy shared by stores, services and routers.

Stores raise these; ``main.py`` renders them as ``{"detail": message}`` with
the matching status code. Messages are user facing and localized.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)

# SQLSTATE raised by PostgreSQL when an EXCLUDE constraint rejects a row
EXCLUSION_VIOLATION = "23P01"

SCHEDULE_CONFLICT_MESSAGE = "選択した時間には既にスケジュールが入っています"


class JobGuideError(Exception):
    status_code = 500
    default_message = "処理に失敗しました"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(JobGuideError):
    status_code = 400
    default_message = "必須項目を入力してください"


class PermissionDeniedError(JobGuideError):
    status_code = 403
    default_message = "この操作を行う権限がありません"


class NotFoundError(JobGuideError):
    status_code = 404
    default_message = "対象のデータが見つかりません"


class ConflictError(JobGuideError):
    status_code = 409
    default_message = SCHEDULE_CONFLICT_MESSAGE

    def __init__(self, message: str | None = None, conflicts: list | None = None):
        super().__init__(message)
        self.conflicts = conflicts or []


class BackendError(JobGuideError):
    status_code = 502
    default_message = "データベースとの通信に失敗しました"


def _is_exclusion_violation(exc: IntegrityError) -> bool:
    return getattr(exc.orig, "pgcode", None) == EXCLUSION_VIOLATION


@contextmanager
def backend_errors(db, action: str):
    """Roll back and wrap database failures raised inside the block.

    Domain errors pass through untouched (after the rollback) so a
    ConflictError raised mid-transaction still undoes earlier writes.
    """
    try:
        yield
    except JobGuideError:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        if _is_exclusion_violation(e):
            logger.info("Exclusion constraint rejected %s", action)
            raise ConflictError() from e
        logger.exception("Integrity error during %s", action)
        raise BackendError() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Database error during %s", action)
        raise BackendError() from e
