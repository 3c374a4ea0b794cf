"""Scheduling router - FastAPI endpoints for the calendar"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...database import get_db
from ...models import CalendarEntry
from .conflicts import AnnotatedEntry
from .roster import Person, get_person
from .schemas import (
    AnnotatedEntryResponse,
    DayCellResponse,
    EntryCreate,
    EntryCreatedResponse,
    EntryResponse,
    EntryUpdate,
    LeadSummary,
    PersonResponse,
    PersonRowResponse,
    WeekResponse,
)
from .service import SchedulingService
from .week import is_today

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calendar", tags=["Calendar"])


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    """Dependency injection for SchedulingService"""
    return SchedulingService(db)


def _person_response(person: Person) -> PersonResponse:
    return PersonResponse(id=person.id, displayName=person.display_name)


def _entry_fields(entry: CalendarEntry) -> dict:
    participants = []
    for person_id in entry.person_ids:
        person = get_person(person_id)
        participants.append(
            PersonResponse(id=person_id, displayName=person.display_name if person else person_id)
        )

    return {
        "id": entry.id,
        "date": entry.date,
        "title": entry.title,
        "startTime": entry.start_time,
        "endTime": entry.end_time,
        "leadId": entry.lead_id,
        "lead": LeadSummary(id=entry.lead.id, displayName=entry.lead.company) if entry.lead else None,
        "participants": participants,
    }


def entry_response(entry: CalendarEntry) -> EntryResponse:
    return EntryResponse(**_entry_fields(entry))


def _annotated_response(item: AnnotatedEntry) -> AnnotatedEntryResponse:
    return AnnotatedEntryResponse(
        **_entry_fields(item.entry),
        conflictsWith=item.conflicts_with,
        hasConflict=item.has_conflict,
    )


# ============================================================================
# ROSTER AND WEEK VIEW
# ============================================================================


@router.get("/roster", response_model=list[PersonResponse])
async def get_roster(service: SchedulingService = Depends(get_scheduling_service)):
    """The fixed set of people entries can be assigned to"""
    return [_person_response(p) for p in service.list_roster()]


@router.get("/week", response_model=WeekResponse)
async def get_week(
    reference: Optional[date] = Query(None, alias="date"),
    offset: int = Query(0),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Week grid (person x day) with overlap annotations. Defaults to the current week."""
    today = date.today()
    week = service.get_week(reference or today, offset)
    return WeekResponse(
        weekStart=week.week_start,
        weekEnd=week.week_end,
        previousWeekStart=week.previous_week_start,
        nextWeekStart=week.next_week_start,
        days=week.days,
        rows=[
            PersonRowResponse(
                person=_person_response(row.person),
                cells=[
                    DayCellResponse(
                        date=cell.date,
                        isToday=is_today(cell.date, today),
                        entries=[_annotated_response(item) for item in cell.entries],
                    )
                    for cell in row.cells
                ],
            )
            for row in week.rows
        ],
    )


@router.get("/today", response_model=list[EntryResponse])
async def get_today(service: SchedulingService = Depends(get_scheduling_service)):
    """Today's appointments for the dashboard"""
    return [entry_response(e) for e in service.entries_on()]


@router.get("/people/{person_id}/entries", response_model=list[EntryResponse])
async def get_person_entries(
    person_id: str,
    from_date: date = Query(..., alias="from"),
    to_date: date = Query(..., alias="to"),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """One person's appointments in a date range"""
    return [entry_response(e) for e in service.entries_for_person(person_id, from_date, to_date)]


# ============================================================================
# ENTRY CRUD
# ============================================================================


@router.get("/entries", response_model=list[EntryResponse])
async def list_entries(
    from_date: date = Query(..., alias="from"),
    to_date: date = Query(..., alias="to"),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Entries in an inclusive date range"""
    return [entry_response(e) for e in service.list_entries(from_date, to_date)]


@router.get("/entries/{entry_id}", response_model=EntryResponse)
async def get_entry(
    entry_id: str,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return entry_response(service.get_entry(entry_id))


@router.get("/entries/{entry_id}/participants", response_model=list[PersonResponse])
async def get_entry_participants(
    entry_id: str,
    service: SchedulingService = Depends(get_scheduling_service),
):
    people = sorted(service.participants_of(entry_id), key=lambda p: p.display_name)
    return [_person_response(p) for p in people]


@router.post("/entries", response_model=EntryCreatedResponse, status_code=201)
async def create_entry(
    data: EntryCreate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Create an entry with one or more participants"""
    return EntryCreatedResponse(id=service.create_entry(data))


@router.put("/entries/{entry_id}", response_model=EntryResponse)
async def update_entry(
    entry_id: str,
    data: EntryUpdate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Replace an entry, including its participant set"""
    return entry_response(service.update_entry(entry_id, data))


@router.delete("/entries/{entry_id}", status_code=204)
async def delete_entry(
    entry_id: str,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Delete an entry. Deleting an unknown entry also succeeds."""
    service.delete_entry(entry_id)
    return Response(status_code=204)
