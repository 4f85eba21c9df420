"""Provider repository - Database operations for provider profiles"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import ServiceProvider, User


class ProviderRepository:
    """Repository for provider database operations"""

    @staticmethod
    def get_by_id(db: Session, provider_id: str) -> Optional[ServiceProvider]:
        return db.query(ServiceProvider).filter(ServiceProvider.id == provider_id).first()

    @staticmethod
    def get_by_user(db: Session, user_id: str) -> Optional[ServiceProvider]:
        return db.query(ServiceProvider).filter(ServiceProvider.user_id == user_id).first()

    @staticmethod
    def create_provider(db: Session, user: User, **provider_data) -> ServiceProvider:
        provider = ServiceProvider(user_id=user.id, **provider_data)
        db.add(provider)
        user.is_provider = True
        db.flush()
        return provider
