"""Calendar entry repository - Database operations for calendar entries"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from ...database import read_for_write, unit_of_work
from ...models import CalendarEntry
from .participants import ParticipantAssignmentManager

logger = logging.getLogger(__name__)


def _with_relations(query):
    return query.options(selectinload(CalendarEntry.participants), joinedload(CalendarEntry.lead))


class EntryRepository:
    """Repository for calendar entry database operations"""

    @staticmethod
    def list_entries(db: Session, from_date: date, to_date: date) -> list[CalendarEntry]:
        """
        Entries between from_date and to_date (inclusive) with participants and lead.

        A failed read returns an empty list so the calendar stays renderable.
        """
        try:
            return (
                _with_relations(db.query(CalendarEntry))
                .filter(CalendarEntry.date >= from_date, CalendarEntry.date <= to_date)
                .order_by(CalendarEntry.date.asc(), CalendarEntry.start_time.asc())
                .all()
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning(f"⚠️ Calendar read failed for {from_date}..{to_date}, returning no entries: {e}")
            return []

    @staticmethod
    def list_entries_for_lead(db: Session, lead_id: str) -> list[CalendarEntry]:
        """Entries linked to a lead, newest first"""
        try:
            return (
                _with_relations(db.query(CalendarEntry))
                .filter(CalendarEntry.lead_id == lead_id)
                .order_by(CalendarEntry.date.desc(), CalendarEntry.start_time.desc())
                .all()
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning(f"⚠️ Lead timeline read failed for lead {lead_id}: {e}")
            return []

    @staticmethod
    def get_entry(db: Session, entry_id: str) -> Optional[CalendarEntry]:
        return _with_relations(db.query(CalendarEntry)).filter(CalendarEntry.id == entry_id).first()

    @staticmethod
    def create_entry(db: Session, person_ids: list[str], **fields) -> CalendarEntry:
        """Create an entry and its assignments in one transaction"""
        entry = CalendarEntry(**fields)
        with unit_of_work(db, "create calendar entry"):
            db.add(entry)
            ParticipantAssignmentManager.replace_assignments(db, entry, person_ids)
        with read_for_write(db, "reload calendar entry"):
            db.refresh(entry)
        return entry

    @staticmethod
    def update_entry(db: Session, entry: CalendarEntry, person_ids: list[str], **fields) -> CalendarEntry:
        """Replace all fields and the participant set of an entry in one transaction"""
        with unit_of_work(db, f"update calendar entry {entry.id}"):
            for key, value in fields.items():
                setattr(entry, key, value)
            ParticipantAssignmentManager.replace_assignments(db, entry, person_ids)
        with read_for_write(db, "reload calendar entry"):
            db.refresh(entry)
        return entry

    @staticmethod
    def delete_entry(db: Session, entry_id: str) -> bool:
        """
        Delete an entry and its assignments.

        Returns False when the entry does not exist.
        """
        with read_for_write(db, f"look up calendar entry {entry_id}"):
            entry = db.query(CalendarEntry).filter(CalendarEntry.id == entry_id).first()
        if not entry:
            return False

        with unit_of_work(db, f"delete calendar entry {entry_id}"):
            entry.participants.clear()
            db.flush()
            db.delete(entry)

        return True
