"""
Scheduling Domain

Calendar entries assigned to people from a fixed roster, browsed one week at
a time, optionally linked to a lead.

Structure:
```
domain/scheduling/
├── week.py          # Week window calculation (Monday first)
├── roster.py        # Fixed set of assignable people
├── conflicts.py     # Per-person overlap detection and the week grid
├── participants.py  # Entry <-> person assignments
├── repository.py    # Calendar entry database queries
├── service.py       # Validation and use cases
├── schemas.py       # Request / response models
└── router.py        # /calendar endpoints
```

Overlaps are reported, never rejected: several people sharing one meeting is
normal, and even a double-booked person is only flagged in the week grid.
"""

from .router import router

__all__ = ["router"]
