"""
Listing ownership guard - gates update, delete and adjudication to the crop's owner.
Interest creation and public reads are deliberately not guarded.
"""

import logging

from krishisetu.core.exceptions import Forbidden
from krishisetu.db.models.crop import Crop
from krishisetu.schemas.auth import Principal

logger = logging.getLogger(__name__)


def is_owner(principal: Principal, crop: Crop) -> bool:
    """Exact, case-sensitive email comparison."""
    return principal.email == crop.owner_email


def ensure_owner(principal: Principal, crop: Crop) -> None:
    if not is_owner(principal, crop):
        logger.warning("Forbidden: %s is not the owner of crop %s", principal.email, crop.id)
        raise Forbidden("Not authorized")
