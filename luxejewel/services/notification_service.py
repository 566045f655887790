# luxejewel/services/notification_service.py
from luxejewel.celery_worker import celery_app
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """Customer notifications, processed asynchronously by Celery."""

    @staticmethod
    def send_order_confirmation(order_id: int, order_number: str, email: str | None):
        send_order_confirmation_task.delay(order_id, order_number, email)


@celery_app.task(name="luxejewel.services.notification_service.send_order_confirmation_task")
def send_order_confirmation_task(order_id: int, order_number: str, email: str | None):
    """
    Order confirmation. There is no mail gateway configured,
    the confirmation is only logged.
    """
    if not email:
        logger.info(f"[NOTIFICATION] Order {order_number} ({order_id}) has no contact email, skipping")
        return {"order_id": order_id, "status": "skipped"}

    logger.info(f"[NOTIFICATION] Confirmation for order {order_number} sent to {email}")
    return {"order_id": order_id, "email": email, "status": "sent"}
