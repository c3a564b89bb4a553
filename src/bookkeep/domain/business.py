"""Business domain service."""

from typing import Optional

from bookkeep.database.base import Database
from bookkeep.domain.entities import Business
from bookkeep.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    business_not_found,
    duplicate_name,
)


class BusinessService:
    """Service for managing businesses."""

    def __init__(self, db: Database):
        """Initialize business service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_business(self, name: str, color: Optional[str] = None) -> int:
        """Create a business.

        Args:
            name: Business name
            color: Optional display color tag

        Returns:
            Business ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a business with the same name exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Business name is required", field="name")
        if self.db.get_business_by_name(name) is not None:
            raise ConflictError(duplicate_name("Business", name))
        return self.db.create_business(name=name, color=color)

    def get_business(self, business_id: int) -> Optional[Business]:
        """Get business by ID."""
        return self.db.get_business(business_id)

    def require_business(self, business_id: int) -> Business:
        """Get business by ID, raising NotFoundError if it does not exist."""
        business = self.db.get_business(business_id)
        if business is None:
            raise NotFoundError(business_not_found(business_id))
        return business

    def get_business_by_name(self, name: str) -> Optional[Business]:
        """Get business by name."""
        return self.db.get_business_by_name(name)

    def list_businesses(self) -> list[Business]:
        """List all businesses."""
        return self.db.list_businesses()
