from sqlalchemy.orm import Session
from datetime import date, datetime, time
from typing import Iterable, List, Optional

from foodtruck_pos.exceptions import ValidationError
from foodtruck_pos.models.sale import Sale, PaymentMethod

END_OF_DAY = time(23, 59, 59, 999000)


def parse_day(value: str) -> date:
    """Parse a YYYY-MM-DD calendar day."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Fecha inválida: '{value}'. Use el formato AAAA-MM-DD.")


class ReportService:
    """Read-only queries over the sale ledger."""

    def __init__(self, db: Session):
        self.db = db

    def sales_report(self, start: Optional[str] = None, end: Optional[str] = None) -> List[Sale]:
        """
        Sales in a date window, newest first.

        Each bound is a calendar day in server local time and is inclusive:
        ``start`` from 00:00:00.000, ``end`` until 23:59:59.999. A missing
        bound leaves that side of the window open.
        """
        query = self.db.query(Sale)

        if start:
            query = query.filter(Sale.timestamp >= datetime.combine(parse_day(start), time.min))
        if end:
            query = query.filter(Sale.timestamp <= datetime.combine(parse_day(end), END_OF_DAY))

        return query.order_by(Sale.timestamp.desc(), Sale.id.desc()).all()

    @staticmethod
    def summarize(sales: Iterable[Sale]) -> dict:
        """
        Fold sales into the totals shown on the report screen.

        ``electronic_total`` groups card and transfer payments, which the
        back-office displays together.
        """
        by_method = {method.value: 0.0 for method in PaymentMethod}
        count = 0
        total = 0.0

        for sale in sales:
            amount = float(sale.total or 0)
            method = PaymentMethod(sale.payment_method).value
            by_method[method] += amount
            total += amount
            count += 1

        return {
            "count": count,
            "total": round(total, 2),
            "by_payment_method": {method: round(amount, 2) for method, amount in by_method.items()},
            "cash_total": round(by_method[PaymentMethod.CASH.value], 2),
            "electronic_total": round(
                by_method[PaymentMethod.CARD.value] + by_method[PaymentMethod.TRANSFER.value], 2
            ),
        }
