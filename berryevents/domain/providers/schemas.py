"""Provider domain schemas"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_HOURLY_RATE = Decimal("250.00")


class ProviderCreate(BaseModel):
    """Onboarding form for the authenticated user's provider profile"""

    providerType: Literal["individual", "company"] = "individual"
    companyName: Optional[str] = Field(None, max_length=255)
    companyRegistration: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=5000)
    hourlyRate: Decimal = Field(DEFAULT_HOURLY_RATE, ge=0, max_digits=10, decimal_places=2)
    servicesOffered: list[str] = Field(default_factory=list)
    experience: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=255)

    @field_validator("companyName", "location")
    @classmethod
    def strip_blank(cls, v):
        if v is None:
            return v
        return v.strip() or None


class ProviderResponse(BaseModel):
    id: str
    userId: str
    businessName: str
    providerType: str
    companyRegistration: Optional[str] = None
    description: Optional[str] = None
    experience: Optional[str] = None
    location: Optional[str] = None
    hourlyRate: str
    servicesOffered: list[str] = Field(default_factory=list)
    isVerified: bool
    createdAt: Optional[datetime] = None
