from foodtruck_pos.schemas.common import CamelModel


class SalesSummary(CamelModel):
    """Totals shown on the back-office sales report."""
    count: int
    total: float
    by_payment_method: dict[str, float]
    cash_total: float
    electronic_total: float
