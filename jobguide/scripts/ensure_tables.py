"""Create any missing tables. Run with ``python -m jobguide.scripts.ensure_tables``."""
from jobguide.database import ensure_tables_exist
from jobguide.logging_config import setup_logging


def main():
    setup_logging()
    ensure_tables_exist()
    print("DB table check complete: created only missing tables.")


if __name__ == "__main__":
    main()
