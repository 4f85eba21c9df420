"""Provider service - onboarding and profile lookup"""

import logging
from typing import NamedTuple

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import ServiceProvider, User
from ...shared.validators import validate_uuid
from .repository import ProviderRepository
from .schemas import ProviderCreate

logger = logging.getLogger(__name__)


class OnboardingResult(NamedTuple):
    provider: ServiceProvider
    created: bool


class ProviderService:
    """Service layer for provider business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProviderRepository()

    def onboard(self, user: User, data: ProviderCreate) -> OnboardingResult:
        """Create the user's provider profile, or return the one they already have"""
        existing = self.repo.get_by_user(self.db, user.id)
        if existing:
            logger.info(f"ℹ️ User {user.id} already has provider profile {existing.id}")
            return OnboardingResult(existing, False)

        business_name = data.companyName or f"{user.first_name} {user.last_name}".strip()
        try:
            provider = self.repo.create_provider(
                self.db,
                user,
                business_name=business_name,
                provider_type=data.providerType,
                company_registration=data.companyRegistration,
                description=data.bio or "",
                experience=data.experience,
                location=data.location,
                hourly_rate=data.hourlyRate,
                services_offered=data.servicesOffered,
                # Profiles are approved on creation
                is_verified=True,
            )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self.repo.get_by_user(self.db, user.id)
            if existing is None:
                raise
            logger.warning(f"⚠️ Concurrent onboarding for user {user.id}, returning existing profile")
            return OnboardingResult(existing, False)

        self.db.refresh(provider)
        logger.info(f"✅ Created provider {provider.id} for user {user.id}")
        return OnboardingResult(provider, True)

    def get_provider(self, provider_id: str) -> ServiceProvider:
        provider = None
        if validate_uuid(provider_id):
            provider = self.repo.get_by_id(self.db, provider_id)
        if not provider:
            raise HTTPException(status_code=404, detail="Provider not found")
        return provider

    def get_provider_for_user(self, user_id: str) -> ServiceProvider:
        provider = None
        if validate_uuid(user_id):
            provider = self.repo.get_by_user(self.db, user_id)
        if not provider:
            raise HTTPException(status_code=404, detail="Provider not found")
        return provider
