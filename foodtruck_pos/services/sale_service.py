from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
import logging

from foodtruck_pos.exceptions import InternalError
from foodtruck_pos.models.sale import Sale
from foodtruck_pos.schemas.auth import SessionUser
from foodtruck_pos.schemas.sale import SaleCreate
from foodtruck_pos.services.catalog_service import CatalogService
from foodtruck_pos.utils.cache import CacheService

logger = logging.getLogger(__name__)


def low_stock_alert(product_name: str, remaining: int) -> str:
    """Message shown to the seller when a product reaches its minimum."""
    return f"¡Alerta! {product_name} ha alcanzado el stock mínimo ({remaining} restantes)."


@dataclass
class SaleOutcome:
    """A recorded sale together with the low-stock alerts it raised."""
    sale: Sale
    alerts: List[str] = field(default_factory=list)


class SaleService:
    """
    Service class for recording sales (the sale ledger).

    STOCK HANDLING:
    ===============
    Stock deduction is permissive: selling more units than are in stock is
    allowed and the stock is clamped at zero rather than rejected. There is
    no reservation step.

    The whole sale runs in one transaction. The cart's product rows are
    locked up front with SELECT ... FOR UPDATE in ID order, so two sales
    touching the same products are serialised by the database, neither
    deduction is lost, and opposite cart orders cannot deadlock. If anything
    fails before commit, every stock change of the sale is rolled back.

    TRUST BOUNDARY:
    ===============
    Line items and the total are stored exactly as the client sent them.
    Prices are not re-read from the catalog and the total is not recomputed.
    """

    def __init__(self, db: Session, cache: Optional[CacheService] = None):
        self.db = db
        self.catalog = CatalogService(db, cache)

    def record_sale(self, sale_data: SaleCreate, seller: SessionUser) -> SaleOutcome:
        """
        Apply a cart to stock and append it to the ledger.

        Algorithm:
        1. Lock every product in the cart with one query ordered by ID,
           then walk the line items in cart order. Items whose product
           no longer exists are skipped.
        2. Deduct the quantity and store max(0, new stock).
        3. If the unclamped new stock is at or below the product's minimum,
           add an alert naming the product and its remaining stock.
        4. Insert the sale with the submitted items and total, the server
           time, and the seller identity from the session.
        5. Commit.

        Args:
            sale_data: Validated cart, total and payment method
            seller: Identity of the user recording the sale

        Returns:
            SaleOutcome with the persisted sale and the alert messages

        Raises:
            InternalError: If the store fails; no stock change survives
        """
        alerts: List[str] = []

        try:
            products = self.catalog.lock_products(item.product_id for item in sale_data.items)

            for item in sale_data.items:
                product = products.get(item.product_id)

                if not product:
                    logger.warning(
                        f"Sale by user #{seller.user_id}: product #{item.product_id} not found, line skipped"
                    )
                    continue

                new_stock = (product.stock or 0) - item.quantity
                self.catalog.update_stock(product.id, new_stock, commit=False)

                if new_stock <= (product.min_stock or 0):
                    alerts.append(low_stock_alert(product.name, product.stock))

            sale = Sale(
                items=[item.model_dump(by_alias=True) for item in sale_data.items],
                total=sale_data.total,
                payment_method=sale_data.payment_method,
                timestamp=datetime.now(),
                seller_id=seller.user_id,
                seller_name=seller.name,
            )

            self.db.add(sale)
            self.db.commit()
            self.db.refresh(sale)

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error recording sale for user #{seller.user_id}: {e}")
            raise InternalError("Error interno del servidor de ventas") from e

        # Stock changed, so the cached POS catalog is stale
        self.catalog.invalidate_pos_cache()

        logger.info(
            f"Sale #{sale.id} recorded by '{seller.username}': "
            f"{len(sale_data.items)} line(s), total {sale.total}, {len(alerts)} alert(s)"
        )

        return SaleOutcome(sale=sale, alerts=alerts)
