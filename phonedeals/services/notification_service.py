# phonedeals/services/notification_service.py
from phonedeals.celery_worker import celery_app
from phonedeals.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """Order notifications, processed asynchronously by Celery."""

    @staticmethod
    def send_order_notification(user_id: str, order_id: int, total_amount: str):
        send_order_notification_task.delay(user_id, order_id, total_amount)


@celery_app.task(name="phonedeals.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: str, order_id: int, total_amount: str):
    """
    Celery task: tells the buyer the order was placed.
    Only logs; a mail or push gateway would be called here.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} placed, total {total_amount}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
