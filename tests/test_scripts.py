import sys

import pytest

import jobguide.scripts.ensure_tables as ensure_tables
import jobguide.scripts.migrate_db as migrate
import jobguide.scripts.promote_instructor as promote
import jobguide.scripts.run_scraper as run_scraper
from jobguide.models.enums import UserRole


class _Conn:
    def __init__(self, fail_on=()):
        self.fail_on = fail_on
        self.executed = []
        self.rollbacks = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, sql):
        text_sql = str(sql)
        if any(marker in text_sql for marker in self.fail_on):
            raise RuntimeError("already exists")
        self.executed.append(text_sql)

    def commit(self):
        return None

    def rollback(self):
        self.rollbacks += 1


def test_migrate_applies_constraints_and_skips_failures(monkeypatch):
    conn = _Conn(fail_on=("student_schedule_no_overlap",))
    monkeypatch.setattr(migrate, "init_db", lambda: None)
    monkeypatch.setattr(migrate.engine, "connect", lambda: conn)
    migrate.main()
    assert any("btree_gist" in s for s in conn.executed)
    assert any("mentoring_bookings_no_overlap" in s for s in conn.executed)
    assert any("interview_stage" in s for s in conn.executed)
    assert conn.rollbacks == 1


def test_ensure_tables_main(monkeypatch):
    called = []
    monkeypatch.setattr(ensure_tables, "ensure_tables_exist", lambda: called.append(True))
    monkeypatch.setattr(ensure_tables, "setup_logging", lambda: None)
    ensure_tables.main()
    assert called == [True]


class _Query:
    def __init__(self, row):
        self.row = row

    def filter(self, *args, **kwargs):
        return self

    def first(self):
        return self.row


class _DB:
    def __init__(self, row=None):
        self.row = row

    def query(self, model):
        return _Query(self.row)

    def close(self):
        return None


def test_promote_instructor_profile_not_found(monkeypatch):
    monkeypatch.setattr(promote, "ensure_tables_exist", lambda: None)
    monkeypatch.setattr(promote, "SessionLocal", lambda: _DB())
    monkeypatch.setattr(promote.sys, "argv", ["prog", "missing@example.com"])
    with pytest.raises(SystemExit):
        promote.main()


def test_promote_instructor_sets_role(monkeypatch):
    profile = type("P", (), {"role": UserRole.STUDENT})()
    roles = []
    monkeypatch.setattr(promote, "ensure_tables_exist", lambda: None)
    monkeypatch.setattr(promote, "SessionLocal", lambda: _DB(profile))
    monkeypatch.setattr(promote, "set_role", lambda db, p, role: roles.append(role))
    monkeypatch.setattr(promote.sys, "argv", ["prog", "Mentor@Example.com"])
    promote.main()
    monkeypatch.setattr(promote.sys, "argv", ["prog", "mentor@example.com", "--revoke"])
    promote.main()
    assert roles == [UserRole.INSTRUCTOR, UserRole.STUDENT]


def test_run_scraper_once(monkeypatch):
    seen = []
    monkeypatch.setattr(run_scraper, "init_db", lambda: None)
    monkeypatch.setattr(run_scraper, "setup_logging", lambda: None)
    monkeypatch.setattr(run_scraper, "SessionLocal", lambda: _DB())
    monkeypatch.setattr(run_scraper, "scrape_all_job_sites", lambda db, kw: seen.append(kw) or [{"title": "x"}])
    monkeypatch.setattr(sys, "argv", ["prog", "--once", "--keyword", "Python"])
    run_scraper.main()
    assert seen == [["Python"]]


def test_run_scraper_loop_survives_failure(monkeypatch):
    monkeypatch.setattr(run_scraper, "init_db", lambda: None)
    monkeypatch.setattr(run_scraper, "setup_logging", lambda: None)
    monkeypatch.setattr(run_scraper, "run_once", lambda kw: (_ for _ in ()).throw(RuntimeError("boom")))
    monkeypatch.setattr(run_scraper.time, "sleep", lambda s: (_ for _ in ()).throw(SystemExit(0)))
    monkeypatch.setattr(sys, "argv", ["prog"])
    with pytest.raises(SystemExit):
        run_scraper.main()
