from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, JSON
import enum

from foodtruck_pos.database import Base


class PaymentMethod(str, enum.Enum):
    """Accepted payment methods."""
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"


class Sale(Base):
    """
    Sale model, the append-only ledger of business activity.

    Rows are written once by the sale ledger and never updated or deleted.
    Line items, total and seller identity are snapshots taken at creation,
    so later edits to products or users do not change history.

    Attributes:
        id: Unique identifier for the sale
        items: Line items exactly as submitted (productId, name, price, quantity)
        total: Total declared by the client
        payment_method: How the customer paid
        timestamp: Server local time when the sale was recorded
        seller_id: Id of the user who recorded the sale
        seller_name: Display name of that user at the time of the sale
    """
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    items = Column(JSON, nullable=False)
    total = Column(Float, nullable=False)
    payment_method = Column(
        Enum(PaymentMethod, values_callable=lambda methods: [m.value for m in methods]),
        nullable=False,
    )
    timestamp = Column(DateTime, nullable=False, index=True)
    seller_id = Column(Integer, nullable=False, index=True)
    seller_name = Column(String(255), nullable=False, default="")

    def __repr__(self):
        return f"<Sale(id={self.id}, total={self.total}, payment_method='{self.payment_method}')>"
