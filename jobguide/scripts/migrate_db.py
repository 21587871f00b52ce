"""Bring an existing PostgreSQL database up to date.

Tables created by ``init_db`` on a fresh database already carry the
exclusion constraints; this adds them to databases created before they
existed. Statements that fail (constraint already present, overlapping rows
still stored) are reported and skipped.
"""
from sqlalchemy import text

from jobguide.database import engine, init_db
from jobguide.models.mentoring import BOOKING_NO_OVERLAP
from jobguide.models.student_schedule import ENABLE_BTREE_GIST, SCHEDULE_NO_OVERLAP

MIGRATIONS = [
    ENABLE_BTREE_GIST,
    SCHEDULE_NO_OVERLAP,
    BOOKING_NO_OVERLAP,
    "ALTER TABLE feedback ADD COLUMN IF NOT EXISTS user_id VARCHAR",
    "ALTER TABLE advertisements ADD COLUMN IF NOT EXISTS company_name VARCHAR",
    "ALTER TABLE student_schedule ADD COLUMN IF NOT EXISTS application_id VARCHAR",
    "ALTER TABLE student_schedule ADD COLUMN IF NOT EXISTS interview_stage VARCHAR(32)",
]


def main():
    init_db()  # Create any missing tables first
    with engine.connect() as conn:
        for sql in MIGRATIONS:
            try:
                conn.execute(text(sql))
                conn.commit()
                print("OK:", sql)
            except Exception as e:
                print("Skip:", e)
                conn.rollback()
    print("Migration done.")


if __name__ == "__main__":
    main()
