"""Utility for resolving business names to IDs."""

from bookkeep.domain.business import BusinessService
from bookkeep.domain.errors import NotFoundError


def resolve_business(business_service: BusinessService, business: str | int) -> int:
    """Resolve business name or ID to business ID.

    Args:
        business_service: BusinessService instance
        business: Business name (str) or ID (int or string representation of int)

    Returns:
        Business ID

    Raises:
        NotFoundError: If business is not found
    """
    business_id = None
    if isinstance(business, int):
        business_id = business
    else:
        try:
            business_id = int(business)
        except (ValueError, TypeError):
            pass

    if business_id is not None:
        if business_service.get_business(business_id) is not None:
            return business_id
        # A numeric name is still a valid name
        by_name = business_service.get_business_by_name(str(business))
        if by_name is None:
            raise NotFoundError(f"Business ID {business_id} not found")
        return by_name.id

    by_name = business_service.get_business_by_name(business)
    if by_name is None:
        raise NotFoundError(f"Business '{business}' not found")
    return by_name.id
