"""Lead domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class LeadCreate(BaseModel):
    company: str
    status: Optional[str] = "Neu"

    @field_validator("company")
    @classmethod
    def validate_company(cls, v):
        if not v or not v.strip():
            raise ValueError("Company must not be empty")
        return v.strip()


class LeadResponse(BaseModel):
    id: str
    company: str
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
