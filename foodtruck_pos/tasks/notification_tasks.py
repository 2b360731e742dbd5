import logging

from foodtruck_pos.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="notify_low_stock")
def notify_low_stock(sale_id: int, alerts: list) -> dict:
    """
    Report the low-stock alerts raised by a sale.

    Operators watch the worker log; each alert is written as its own
    warning so it can be grepped and forwarded.

    Args:
        sale_id: ID of the sale that triggered the alerts
        alerts: Alert messages produced by the sale ledger

    Returns:
        Dictionary with the number of alerts reported
    """
    for alert in alerts:
        logger.warning(f"Sale #{sale_id}: {alert}")

    return {
        "status": "reported",
        "sale_id": sale_id,
        "alerts": len(alerts)
    }


@celery_app.task(name="send_reset_code")
def send_reset_code(email: str, name: str, code: str) -> dict:
    """
    Deliver a password reset code.

    Delivery is simulated: the code is written to the worker log instead of
    being e-mailed.
    """
    logger.info("-" * 50)
    logger.info("PASSWORD RESET CODE (simulated delivery)")
    logger.info(f"To: {email or '<no e-mail>'} ({name})")
    logger.info(f"Code: {code}")
    logger.info("-" * 50)

    return {
        "status": "sent",
        "email": email
    }
