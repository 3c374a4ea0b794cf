"""Lead repository - Database operations for leads"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...database import read_for_write, unit_of_work
from ...models import CalendarEntry, Lead

logger = logging.getLogger(__name__)


class LeadRepository:
    """Repository for lead database operations"""

    @staticmethod
    def list_leads(db: Session) -> list[Lead]:
        """Get all leads ordered by company name"""
        return db.query(Lead).order_by(Lead.company.asc()).all()

    @staticmethod
    def get_lead(db: Session, lead_id: str) -> Optional[Lead]:
        return db.query(Lead).filter(Lead.id == lead_id).first()

    @staticmethod
    def create_lead(db: Session, company: str, status: str = "Neu") -> Lead:
        """Create a new lead"""
        lead = Lead(company=company, status=status)
        with unit_of_work(db, "create lead"):
            db.add(lead)
        with read_for_write(db, "reload lead"):
            db.refresh(lead)
        return lead

    @staticmethod
    def delete_lead(db: Session, lead_id: str) -> bool:
        """
        Delete a lead and detach it from every calendar entry.

        Entries referencing the lead keep existing with lead_id set to NULL.
        Returns False if the lead did not exist.
        """
        with read_for_write(db, f"look up lead {lead_id}"):
            lead = db.query(Lead).filter(Lead.id == lead_id).first()
        if not lead:
            return False

        with unit_of_work(db, f"delete lead {lead_id}"):
            detached = (
                db.query(CalendarEntry)
                .filter(CalendarEntry.lead_id == lead_id)
                .update({CalendarEntry.lead_id: None}, synchronize_session="fetch")
            )
            db.delete(lead)

        logger.info(f"🗑️ Deleted lead {lead_id}, detached {detached} calendar entries")
        return True
