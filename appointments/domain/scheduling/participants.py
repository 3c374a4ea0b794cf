"""Participant assignments - the many-to-many link between entries and roster people"""

import logging
from datetime import date
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import CalendarEntry, CalendarEntryParticipant
from ...shared.exceptions import ValidationError
from .roster import Person, get_person, require_members

logger = logging.getLogger(__name__)


class ParticipantAssignmentManager:
    """Validation and whole-set replacement of entry participants"""

    @staticmethod
    def validate_participants(person_ids: Optional[Iterable[str]]) -> list[str]:
        """
        Normalize a submitted participant list.

        Duplicates are collapsed keeping the first occurrence. The result is
        never empty and only contains roster members.
        """
        ids = list(dict.fromkeys(p.strip() for p in (person_ids or []) if p and p.strip()))
        if not ids:
            raise ValidationError("At least one participant is required", field="participantIds")
        require_members(ids)
        return ids

    @staticmethod
    def replace_assignments(db: Session, entry: CalendarEntry, person_ids: list[str]) -> None:
        """
        Replace the entry's participant set inside the caller's transaction.

        Old rows are deleted and flushed before the new rows are inserted so
        re-adding a person does not collide with the (entry_id, person_id)
        unique constraint. Nothing is visible to other sessions until commit.
        """
        if entry.participants:
            entry.participants.clear()
            db.flush()

        for person_id in person_ids:
            entry.participants.append(CalendarEntryParticipant(person_id=person_id))
        db.flush()

    @staticmethod
    def assignments_for(db: Session, entry_id: str) -> set[Person]:
        """People assigned to one entry"""
        rows = (
            db.query(CalendarEntryParticipant.person_id)
            .filter(CalendarEntryParticipant.entry_id == entry_id)
            .all()
        )
        people = set()
        for (person_id,) in rows:
            person = get_person(person_id)
            if person is None:
                # Row written before the person left the roster
                logger.warning(f"⚠️ Entry {entry_id} references unknown person {person_id}")
                continue
            people.add(person)
        return people

    @staticmethod
    def entries_for(db: Session, person_id: str, from_date: date, to_date: date) -> list[CalendarEntry]:
        """
        One person's entries in a date range, ordered by date then start time.

        An unknown person is rejected. A failed read returns an empty list,
        the same as EntryRepository.list_entries.
        """
        require_members([person_id], field="personId")
        try:
            return (
                db.query(CalendarEntry)
                .join(CalendarEntryParticipant, CalendarEntryParticipant.entry_id == CalendarEntry.id)
                .filter(
                    CalendarEntryParticipant.person_id == person_id,
                    CalendarEntry.date >= from_date,
                    CalendarEntry.date <= to_date,
                )
                .options(selectinload(CalendarEntry.participants), joinedload(CalendarEntry.lead))
                .order_by(CalendarEntry.date.asc(), CalendarEntry.start_time.asc())
                .all()
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning(f"⚠️ Calendar read failed for {person_id} {from_date}..{to_date}, returning no entries: {e}")
            return []
