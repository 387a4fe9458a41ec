from notifications.model.base import NotificationModel
from notifications.model.delivery_status import DeliveryStatus

__all__ = ["DeliveryStatus", "NotificationModel"]
