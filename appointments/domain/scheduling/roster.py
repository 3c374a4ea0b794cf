"""
The roster: the fixed set of people appointments can be assigned to.

Membership is configuration, not data. Anything not listed here is rejected
at the validation boundary.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from ...shared.exceptions import ValidationError


@dataclass(frozen=True)
class Person:
    id: str
    display_name: str


ROSTER: tuple[Person, ...] = (
    Person(id="richard-gumpinger", display_name="Richard Gumpinger"),
    Person(id="simon-hoeld", display_name="Simon Höld"),
    Person(id="bennet-wylezol", display_name="Bennet Wylezol"),
)

_BY_ID = {person.id: person for person in ROSTER}


def list_roster() -> list[Person]:
    return list(ROSTER)


def get_person(person_id: str) -> Optional[Person]:
    return _BY_ID.get(person_id)


def require_members(person_ids: Iterable[str], field: str = "participantIds") -> list[Person]:
    """Resolve ids to roster people, rejecting the first unknown id"""
    people = []
    for person_id in person_ids:
        person = _BY_ID.get(person_id)
        if person is None:
            raise ValidationError(f"Unknown participant: {person_id!r}", field=field)
        people.append(person)
    return people
