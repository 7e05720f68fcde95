# backend/repairdesk/init_db.py
"""
Create the schema and seed a default weekly schedule.

    python -m repairdesk.init_db

Existing tables and business hours are left as they are.
"""

from datetime import time
import logging

from . import models  # noqa: F401
from .database import Base, SessionLocal, engine
from .repositories.factory import RepositoryFactory

logger = logging.getLogger(__name__)

# Mon-Fri 09:00-17:00 with a lunch break, Saturday mornings, closed Sunday
DEFAULT_WEEK = {
    0: dict(open_time=time(10, 0), close_time=time(14, 0), is_active=False),
    1: dict(open_time=time(9, 0), close_time=time(17, 0), break_start=time(12, 0), break_end=time(13, 0)),
    2: dict(open_time=time(9, 0), close_time=time(17, 0), break_start=time(12, 0), break_end=time(13, 0)),
    3: dict(open_time=time(9, 0), close_time=time(17, 0), break_start=time(12, 0), break_end=time(13, 0)),
    4: dict(open_time=time(9, 0), close_time=time(17, 0), break_start=time(12, 0), break_end=time(13, 0)),
    5: dict(open_time=time(9, 0), close_time=time(17, 0), break_start=time(12, 0), break_end=time(13, 0)),
    6: dict(open_time=time(10, 0), close_time=time(14, 0)),
}


def init_db(seed: bool = True) -> None:
    """Create all tables; optionally seed business hours for weekdays without a row."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
    if not seed:
        return

    db = SessionLocal()
    try:
        repository = RepositoryFactory.create_business_hours_repository(db)
        existing = repository.get_week_map()
        for day, fields in DEFAULT_WEEK.items():
            if day not in existing:
                repository.create(day_of_week=day, **fields)
        db.commit()
        logger.info(f"Seeded business hours for {len(DEFAULT_WEEK) - len(existing)} weekdays")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    init_db()
