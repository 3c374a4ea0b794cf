import uuid

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_public_id():
    """Generate an opaque unique identifier"""
    return str(uuid.uuid4())


class Lead(Base):
    """Customer record owned by the leads subsystem. Calendar entries only reference it."""

    __tablename__ = "leads"

    id = Column(String(36), primary_key=True, default=generate_public_id)
    company = Column(String(255), nullable=False, index=True)
    status = Column(String(50), default="Neu", nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    # No cascade: deleting a lead nullifies entry.lead_id (see LeadRepository.delete_lead)
    calendar_entries = relationship("CalendarEntry", back_populates="lead", passive_deletes=True)


class CalendarEntry(Base):
    __tablename__ = "calendar_entries"

    id = Column(String(36), primary_key=True, default=generate_public_id)
    date = Column(Date, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    start_time = Column(String(5), nullable=False)  # HH:MM format
    end_time = Column(String(5), nullable=False)  # HH:MM format
    lead_id = Column(String(36), ForeignKey("leads.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    participants = relationship(
        "CalendarEntryParticipant",
        back_populates="entry",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CalendarEntryParticipant.id",
    )
    lead = relationship("Lead", back_populates="calendar_entries")

    @property
    def person_ids(self) -> list[str]:
        return [p.person_id for p in self.participants]


class CalendarEntryParticipant(Base):
    """Assignment of one roster person to one calendar entry"""

    __tablename__ = "calendar_entry_participants"
    __table_args__ = (UniqueConstraint("entry_id", "person_id", name="uq_entry_person"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    entry_id = Column(
        String(36),
        ForeignKey("calendar_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    person_id = Column(String(100), nullable=False, index=True)

    entry = relationship("CalendarEntry", back_populates="participants")
