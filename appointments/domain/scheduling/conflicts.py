"""
Per-person overlap detection.

Entries are half-open intervals [start, end): two entries conflict when
a.start < b.end and b.start < a.end, so back-to-back entries do not.
Conflicts are advisory and never block a write.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, time
from typing import Iterable, Sequence, Union

from ...models import CalendarEntry
from ...shared.validators import parse_hhmm
from .roster import Person

TimeLike = Union[str, time]


def _to_time(value: TimeLike, field_name: str) -> time:
    if isinstance(value, time):
        return value
    return parse_hhmm(value, field_name)


@dataclass(frozen=True)
class Interval:
    entry_id: str
    start: time
    end: time

    @classmethod
    def from_entry(cls, entry) -> "Interval":
        return cls(
            entry_id=entry.id,
            start=_to_time(entry.start_time, "startTime"),
            end=_to_time(entry.end_time, "endTime"),
        )


def overlaps(a: Interval, b: Interval) -> bool:
    return a.start < b.end and b.start < a.end


def find_conflicts(entries: Iterable) -> dict[str, list[str]]:
    """
    Map each entry id to the ids of the other entries it overlaps.

    Expects the entries of one person on one date. Entries without
    conflicts map to an empty list.
    """
    intervals = [Interval.from_entry(e) for e in entries]
    result: dict[str, list[str]] = {i.entry_id: [] for i in intervals}

    for idx, a in enumerate(intervals):
        for b in intervals[idx + 1 :]:
            if a.entry_id == b.entry_id:
                continue
            if overlaps(a, b):
                result[a.entry_id].append(b.entry_id)
                result[b.entry_id].append(a.entry_id)

    return result


@dataclass
class AnnotatedEntry:
    entry: CalendarEntry
    conflicts_with: list[str] = field(default_factory=list)

    @property
    def has_conflict(self) -> bool:
        return bool(self.conflicts_with)


@dataclass
class DayCell:
    date: date
    entries: list[AnnotatedEntry] = field(default_factory=list)


@dataclass
class PersonRow:
    person: Person
    cells: list[DayCell] = field(default_factory=list)


def build_week_grid(
    entries: Iterable[CalendarEntry],
    days: Sequence[date],
    roster: Sequence[Person],
) -> list[PersonRow]:
    """One row per roster person, one cell per day, each entry annotated with its overlaps"""
    by_cell: dict[tuple[str, date], list[CalendarEntry]] = defaultdict(list)
    for entry in entries:
        for person_id in dict.fromkeys(entry.person_ids):
            by_cell[(person_id, entry.date)].append(entry)

    rows = []
    for person in roster:
        row = PersonRow(person=person)
        for day in days:
            cell_entries = sorted(by_cell.get((person.id, day), []), key=lambda e: e.start_time)
            conflicts = find_conflicts(cell_entries)
            row.cells.append(
                DayCell(
                    date=day,
                    entries=[AnnotatedEntry(e, conflicts[e.id]) for e in cell_entries],
                )
            )
        rows.append(row)

    return rows
