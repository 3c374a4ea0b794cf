"""Scheduling service - Business logic for calendar entries"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...database import read_for_write
from ...models import CalendarEntry
from ...shared.exceptions import NotFoundError, ValidationError
from ...shared.validators import format_hhmm, parse_hhmm, validate_title
from ..leads.repository import LeadRepository
from .conflicts import PersonRow, build_week_grid
from .participants import ParticipantAssignmentManager
from .repository import EntryRepository
from .roster import Person, list_roster
from .schemas import EntryCreate, EntryUpdate
from .week import neighbour_week, shift_week, week_of

logger = logging.getLogger(__name__)


@dataclass
class WeekView:
    week_start: date
    days: list[date]
    rows: list[PersonRow]

    @property
    def week_end(self) -> date:
        return self.days[-1]

    @property
    def previous_week_start(self) -> Optional[date]:
        return neighbour_week(self.week_start, -1)

    @property
    def next_week_start(self) -> Optional[date]:
        return neighbour_week(self.week_start, 1)


class SchedulingService:
    """Service layer for calendar entry business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EntryRepository()
        self.participants = ParticipantAssignmentManager()
        self.leads = LeadRepository()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_roster(self) -> list[Person]:
        return list_roster()

    def list_entries(self, from_date: date, to_date: date) -> list[CalendarEntry]:
        """Entries in an inclusive date range, ordered by date then start time"""
        if from_date > to_date:
            raise ValidationError("Range start must not be after range end", field="from")
        return self.repo.list_entries(self.db, from_date, to_date)

    def get_entry(self, entry_id: str) -> CalendarEntry:
        entry = self.repo.get_entry(self.db, entry_id)
        if not entry:
            raise NotFoundError("Calendar entry not found", entity_id=entry_id)
        return entry

    def get_week(self, reference: date, offset: int = 0) -> WeekView:
        """Calendar grid for the week containing reference, moved by offset weeks"""
        days = week_of(shift_week(reference, offset))
        entries = self.repo.list_entries(self.db, days[0], days[-1])
        rows = build_week_grid(entries, days, self.list_roster())

        conflict_count = sum(
            1 for row in rows for cell in row.cells for item in cell.entries if item.has_conflict
        )
        if conflict_count:
            logger.info(f"📅 Week of {days[0]}: {len(entries)} entries, {conflict_count} overlapping")

        return WeekView(week_start=days[0], days=days, rows=rows)

    def entries_for_person(self, person_id: str, from_date: date, to_date: date) -> list[CalendarEntry]:
        if from_date > to_date:
            raise ValidationError("Range start must not be after range end", field="from")
        return self.participants.entries_for(self.db, person_id, from_date, to_date)

    def participants_of(self, entry_id: str) -> set[Person]:
        self.get_entry(entry_id)
        return self.participants.assignments_for(self.db, entry_id)

    def entries_on(self, day: Optional[date] = None) -> list[CalendarEntry]:
        """Appointments of a single day (today by default)"""
        day = day or date.today()
        return self.repo.list_entries(self.db, day, day)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_entry(self, data: EntryCreate) -> str:
        """Validate and create an entry. Returns the new entry id."""
        fields, person_ids = self._validate(data)
        entry = self.repo.create_entry(self.db, person_ids, **fields)
        logger.info(
            f"✅ Created calendar entry {entry.id} on {entry.date} "
            f"{entry.start_time}-{entry.end_time} for {', '.join(person_ids)}"
        )
        return entry.id

    def update_entry(self, entry_id: str, data: EntryUpdate) -> CalendarEntry:
        """Replace every field and the participant set of an existing entry"""
        fields, person_ids = self._validate(data)
        with read_for_write(self.db, f"load calendar entry {entry_id}"):
            entry = self.get_entry(entry_id)
        entry = self.repo.update_entry(self.db, entry, person_ids, **fields)
        logger.info(f"✏️ Updated calendar entry {entry_id}")
        return entry

    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry. Unknown ids are ignored."""
        if self.repo.delete_entry(self.db, entry_id):
            logger.info(f"🗑️ Deleted calendar entry {entry_id}")
        else:
            logger.debug(f"Delete of unknown calendar entry {entry_id} ignored")

    def _validate(self, data: EntryCreate) -> tuple[dict, list[str]]:
        """Check an entry form before anything is written"""
        title = validate_title(data.title)
        start = parse_hhmm(data.startTime, "startTime")
        end = parse_hhmm(data.endTime, "endTime")
        if start >= end:
            raise ValidationError("Start time must be before end time", field="endTime")

        person_ids = self.participants.validate_participants(data.participantIds)

        lead_id = (data.leadId or "").strip() or None
        if lead_id:
            with read_for_write(self.db, f"look up lead {lead_id}"):
                lead = self.leads.get_lead(self.db, lead_id)
            if not lead:
                raise ValidationError(f"Unknown lead: {lead_id!r}", field="leadId")

        fields = {
            "date": data.date,
            "title": title,
            "start_time": format_hhmm(start),
            "end_time": format_hhmm(end),
            "lead_id": lead_id,
        }
        return fields, person_ids
