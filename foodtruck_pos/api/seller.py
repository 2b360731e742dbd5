import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from kombu.exceptions import OperationalError

from foodtruck_pos.api.deps import get_cache, json_body, require_roles
from foodtruck_pos.database import get_db
from foodtruck_pos.models.user import UserRole
from foodtruck_pos.schemas.auth import SessionUser
from foodtruck_pos.schemas.catalog import PosCategory
from foodtruck_pos.schemas.sale import InsertResult, SaleCreate, SaleResult
from foodtruck_pos.services.pos_service import PosService
from foodtruck_pos.services.sale_service import SaleService
from foodtruck_pos.tasks.notification_tasks import notify_low_stock
from foodtruck_pos.utils.cache import CacheService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vendedor", tags=["Point of sale"])

seller_access = require_roles(UserRole.ADMIN, UserRole.SELLER)


@router.get(
    "/pos-data",
    response_model=list[PosCategory],
    summary="Catalog for the POS screen",
    description="Categories, each with the products listed under it. Cached in Redis."
)
def pos_data(
    session: SessionUser = Depends(seller_access),
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache)
):
    return PosService(db, cache).pos_data()


@router.post(
    "/sales",
    response_model=SaleResult,
    status_code=status.HTTP_201_CREATED,
    summary="Record a sale",
    description="""
    Record a sale from the POS cart.

    **Stock handling:**
    Each line deducts its quantity from the product's stock, clamped at zero.
    Lines for products that no longer exist are skipped. A line whose product
    ends at or below its minimum stock adds an alert to the response.

    The items and total are stored as submitted, stamped with the server time
    and the logged-in seller.
    """
)
def record_sale(
    session: SessionUser = Depends(seller_access),
    sale_data: SaleCreate = Depends(json_body(SaleCreate)),
    db: Session = Depends(get_db),
    cache: CacheService = Depends(get_cache)
):
    outcome = SaleService(db, cache).record_sale(sale_data, session)

    if outcome.alerts:
        try:
            notify_low_stock.delay(outcome.sale.id, outcome.alerts)
        except OperationalError as e:
            # The sale is already committed; losing the notification is not fatal
            logger.error(f"Could not queue low-stock notification for sale #{outcome.sale.id}: {e}")

    return SaleResult(
        result=InsertResult(inserted_id=outcome.sale.id, acknowledged=True),
        alerts=outcome.alerts,
    )
