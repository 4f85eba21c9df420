"""Provider router - /api/providers endpoints"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import ServiceProvider, User
from ..pricing.calculations import format_money
from .schemas import ProviderCreate, ProviderResponse
from .service import ProviderService

router = APIRouter(prefix="/api/providers", tags=["Providers"])


def get_provider_service(db: Session = Depends(get_db)) -> ProviderService:
    """Dependency injection for ProviderService"""
    return ProviderService(db)


def provider_response(provider: ServiceProvider) -> ProviderResponse:
    return ProviderResponse(
        id=provider.id,
        userId=provider.user_id,
        businessName=provider.business_name,
        providerType=provider.provider_type or "individual",
        companyRegistration=provider.company_registration,
        description=provider.description,
        experience=provider.experience,
        location=provider.location,
        hourlyRate=format_money(provider.hourly_rate),
        servicesOffered=provider.services_offered or [],
        isVerified=bool(provider.is_verified),
        createdAt=provider.created_at,
    )


@router.post("", response_model=ProviderResponse, status_code=status.HTTP_201_CREATED)
async def create_provider(
    data: ProviderCreate,
    response: Response,
    current_user: User = Depends(get_current_user),
    service: ProviderService = Depends(get_provider_service),
):
    """Register the caller as a service provider (200 with the existing profile on repeat)"""
    result = service.onboard(current_user, data)
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return provider_response(result.provider)


@router.get("/by-user/{user_id}", response_model=ProviderResponse)
async def get_provider_by_user(user_id: str, service: ProviderService = Depends(get_provider_service)):
    return provider_response(service.get_provider_for_user(user_id))


@router.get("/{provider_id}", response_model=ProviderResponse)
async def get_provider(provider_id: str, service: ProviderService = Depends(get_provider_service)):
    return provider_response(service.get_provider(provider_id))
