"""Lead router - lookup endpoints used by the calendar"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...database import get_db
from ..scheduling.router import entry_response
from ..scheduling.schemas import EntryResponse, LeadSummary
from .schemas import LeadCreate, LeadResponse
from .service import LeadService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leads", tags=["Leads"])


def get_lead_service(db: Session = Depends(get_db)) -> LeadService:
    """Dependency injection for LeadService"""
    return LeadService(db)


@router.get("", response_model=list[LeadSummary])
async def list_leads(service: LeadService = Depends(get_lead_service)):
    """Leads for the entry form's selector"""
    return [LeadSummary(**summary) for summary in service.list_lead_summaries()]


@router.post("", response_model=LeadResponse, status_code=201)
async def create_lead(data: LeadCreate, service: LeadService = Depends(get_lead_service)):
    return service.create_lead(data)


@router.delete("/{lead_id}", status_code=204)
async def delete_lead(lead_id: str, service: LeadService = Depends(get_lead_service)):
    """Delete a lead and clear it from every calendar entry"""
    service.delete_lead(lead_id)
    return Response(status_code=204)


@router.get("/{lead_id}/entries", response_model=list[EntryResponse])
async def get_lead_entries(lead_id: str, service: LeadService = Depends(get_lead_service)):
    """Appointments with this lead, newest first"""
    return [entry_response(e) for e in service.lead_timeline(lead_id)]
