import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from jobguide.errors import BackendError, ConflictError, NotFoundError, backend_errors


class _DB:
    def __init__(self):
        self.rolled_back = 0

    def rollback(self):
        self.rolled_back += 1


class _Orig(Exception):
    def __init__(self, pgcode):
        super().__init__("orig")
        self.pgcode = pgcode


def test_exclusion_violation_becomes_conflict():
    db = _DB()
    with pytest.raises(ConflictError) as ex:
        with backend_errors(db, "insert"):
            raise IntegrityError("INSERT", {}, _Orig("23P01"))
    assert ex.value.status_code == 409
    assert db.rolled_back == 1


def test_other_database_errors_become_backend_error():
    db = _DB()
    with pytest.raises(BackendError):
        with backend_errors(db, "insert"):
            raise IntegrityError("INSERT", {}, _Orig("23505"))
    with pytest.raises(BackendError):
        with backend_errors(db, "select"):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))
    assert db.rolled_back == 2


def test_domain_errors_pass_through_after_rollback():
    db = _DB()
    with pytest.raises(NotFoundError):
        with backend_errors(db, "get"):
            raise NotFoundError()
    assert db.rolled_back == 1


def test_default_messages():
    assert ConflictError().message == "選択した時間には既にスケジュールが入っています"
    assert ConflictError("other").conflicts == []
