"""Notification models shared between the transport and REST layers.

Each model serializes to a compact binary stream (process-to-process
transport) and to a JSON document (REST), and validates its invariants on
every construction path.
"""

from notifications.model.delivery_status import DeliveryStatus

__all__ = ["DeliveryStatus"]
