"""Scheduling domain schemas - Pydantic models for validation"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class EntryCreate(BaseModel):
    """Schema for creating a calendar entry"""

    title: str
    date: date
    startTime: str = "09:00"
    endTime: str = "10:00"
    participantIds: list[str] = Field(default_factory=list)
    leadId: Optional[str] = None


class EntryUpdate(EntryCreate):
    """Schema for editing an entry. Every field is replaced, including the participant set."""


class EntryCreatedResponse(BaseModel):
    id: str


class PersonResponse(BaseModel):
    id: str
    displayName: str


class LeadSummary(BaseModel):
    id: str
    displayName: str


class EntryResponse(BaseModel):
    """Schema for entry response"""

    id: str
    date: date
    title: str
    startTime: str
    endTime: str
    leadId: Optional[str] = None
    lead: Optional[LeadSummary] = None
    participants: list[PersonResponse]


class AnnotatedEntryResponse(EntryResponse):
    conflictsWith: list[str] = Field(default_factory=list)
    hasConflict: bool = False


class DayCellResponse(BaseModel):
    date: date
    isToday: bool
    entries: list[AnnotatedEntryResponse]


class PersonRowResponse(BaseModel):
    person: PersonResponse
    cells: list[DayCellResponse]


class WeekResponse(BaseModel):
    """One week of the calendar grid"""

    weekStart: date
    weekEnd: date
    previousWeekStart: Optional[date] = None
    nextWeekStart: Optional[date] = None
    days: list[date]
    rows: list[PersonRowResponse]
