"""
RabbitMQ Event Publisher

Pushes order and stock events to a topic exchange so UIs and notifiers can
refresh without polling. Publishing is best-effort: failures are logged and
never undo the committed change.
"""
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

import pika
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from orderdesk.config import settings
from orderdesk.schemas.order import OrderEvent

logger = logging.getLogger(__name__)

ORDER_CREATED = ("OrderCreated", "order.created")
ORDER_STATUS_CHANGED = ("OrderStatusChanged", "order.status.changed")
STOCK_ADJUSTED = ("StockAdjusted", "inventory.stock.adjusted")


class EventPublisher:
    """Publisher for sending events to RabbitMQ"""

    def __init__(self, enabled: Optional[bool] = None):
        self.enabled = settings.EVENTS_ENABLED if enabled is None else enabled
        self.rabbitmq_url = settings.RABBITMQ_URL
        self.exchange = settings.RABBITMQ_EXCHANGE

    @retry(
        stop=stop_after_attempt(settings.MAX_RETRIES),
        wait=wait_exponential(multiplier=settings.RETRY_DELAY, min=1, max=10),
        retry=retry_if_exception_type(pika.exceptions.AMQPConnectionError),
        reraise=True
    )
    def _connect(self) -> pika.BlockingConnection:
        return pika.BlockingConnection(pika.URLParameters(self.rabbitmq_url))

    def _build_event(self, event_type: str, data: Dict) -> OrderEvent:
        return OrderEvent(
            event_type=event_type,
            event_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc).isoformat(),
            source=settings.SERVICE_NAME,
            data=data,
        )

    def publish(self, event_type: str, routing_key: str, data: Dict) -> bool:
        """
        Publish one event

        Returns:
            True if published successfully, False otherwise
        """
        if not self.enabled:
            logger.debug("Events disabled; skipping %s", event_type)
            return False

        event = self._build_event(event_type, data)
        try:
            connection = self._connect()
            try:
                channel = connection.channel()
                channel.exchange_declare(
                    exchange=self.exchange,
                    exchange_type='topic',
                    durable=True
                )
                # Enable publisher confirms
                channel.confirm_delivery()
                channel.basic_publish(
                    exchange=self.exchange,
                    routing_key=routing_key,
                    body=json.dumps(event.model_dump(), default=str),
                    properties=pika.BasicProperties(
                        delivery_mode=2,  # Persistent message
                        content_type='application/json',
                        correlation_id=event.event_id
                    ),
                    mandatory=False
                )
            finally:
                connection.close()
        except Exception as e:
            logger.warning("Failed to publish %s event: %s", event_type, e)
            return False

        logger.info("Event published: %s (ID: %s)", event_type, event.event_id)
        return True

    def publish_order_created(self, order_data: Dict) -> bool:
        return self.publish(*ORDER_CREATED, order_data)

    def publish_order_status_changed(self, order_data: Dict) -> bool:
        return self.publish(*ORDER_STATUS_CHANGED, order_data)

    def publish_stock_adjusted(self, stock_data: Dict) -> bool:
        return self.publish(*STOCK_ADJUSTED, stock_data)
