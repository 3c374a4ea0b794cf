"""Lead service - the slice of the lead subsystem the calendar depends on"""

import logging

from sqlalchemy.orm import Session

from ...models import CalendarEntry, Lead
from ...shared.exceptions import NotFoundError
from ..scheduling.repository import EntryRepository
from .repository import LeadRepository
from .schemas import LeadCreate

logger = logging.getLogger(__name__)


class LeadService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = LeadRepository()
        self.entries = EntryRepository()

    def list_lead_summaries(self) -> list[dict]:
        """{id, displayName} pairs for the lead selector"""
        return [{"id": lead.id, "displayName": lead.company} for lead in self.repo.list_leads(self.db)]

    def get_lead(self, lead_id: str) -> Lead:
        lead = self.repo.get_lead(self.db, lead_id)
        if not lead:
            raise NotFoundError("Lead not found", entity_id=lead_id)
        return lead

    def create_lead(self, data: LeadCreate) -> Lead:
        lead = self.repo.create_lead(self.db, data.company, data.status or "Neu")
        logger.info(f"✅ Created lead {lead.id} ({lead.company})")
        return lead

    def delete_lead(self, lead_id: str) -> None:
        """Delete a lead. Linked calendar entries survive with their lead reference cleared."""
        self.repo.delete_lead(self.db, lead_id)

    def lead_timeline(self, lead_id: str) -> list[CalendarEntry]:
        """Appointments with this lead, newest first"""
        self.get_lead(lead_id)
        return self.entries.list_entries_for_lead(self.db, lead_id)
