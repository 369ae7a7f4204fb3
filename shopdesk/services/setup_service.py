import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from shopdesk.core.errors import Conflict
from shopdesk.database.transaction import atomic
from shopdesk.models.business import Business
from shopdesk.models.shop import Shop
from shopdesk.schemas.auth import SetupAccountRequest
from shopdesk.services.auth_service import owned_business, record_event
from shopdesk.services.user_service import get_user

logger = logging.getLogger(__name__)


def create_account(db: Session, payload: SetupAccountRequest, *, ip_address=None, user_agent=None) -> Business:
    """Create the owner's business and its shops in one transaction."""
    user = get_user(db, payload.user_id)
    if owned_business(db, user.id) is not None:
        raise Conflict("User {} already has a business".format(user.id))

    with atomic(db):
        business = Business(owner_id=user.id, **payload.business.model_dump())
        db.add(business)
        db.flush()
        for shop in payload.shops:
            db.add(Shop(business_id=business.id, **shop.model_dump()))
        db.flush()
        if user.shop_id is None:
            user.shop_id = db.execute(
                select(Shop.id).where(Shop.business_id == business.id).order_by(Shop.id).limit(1)
            ).scalar()
        record_event(
            db,
            event_type="system_change",
            status="success",
            description="Business setup completed",
            user_id=user.id,
            shop_id=user.shop_id,
            ip_address=ip_address,
            user_agent=user_agent,
        )

    logger.info("Business %s created for user %s with %d shop(s).", business.id, user.id, len(payload.shops))
    return owned_business(db, user.id)


def is_setup_complete(db: Session, user_id: int) -> bool:
    user = get_user(db, user_id)
    return owned_business(db, user.id) is not None
