import unittest
from datetime import date

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from appointments import models  # noqa: F401
from appointments.database import Base, enable_sqlite_foreign_keys
from appointments.domain.scheduling.schemas import EntryCreate

RICHARD = "richard-gumpinger"
SIMON = "simon-hoeld"
BENNET = "bennet-wylezol"


def entry_form(**overrides) -> EntryCreate:
    data = {
        "title": "Kickoff",
        "date": date(2024, 6, 3),
        "startTime": "09:00",
        "endTime": "10:00",
        "participantIds": [RICHARD],
        "leadId": None,
    }
    data.update(overrides)
    return EntryCreate(**data)


class DatabaseTestCase(unittest.TestCase):
    """Fresh in-memory SQLite database per test"""

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        enable_sqlite_foreign_keys(self.engine)
        Base.metadata.create_all(bind=self.engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db = self.SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(bind=self.engine)
        self.engine.dispose()
