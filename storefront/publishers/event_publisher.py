"""
RabbitMQ Event Publisher
"""
import pika
import json
import uuid
from datetime import datetime, timezone
from typing import Dict
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from storefront.config import settings
from storefront.logger import get_logger

logger = get_logger(__name__)


def build_event(event_type: str, data: Dict) -> Dict:
    """Wrap a payload in the event envelope shared by every storefront event"""
    return {
        "event_type": event_type,
        "event_id": str(uuid.uuid4()),
        "event_version": "1.0",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "source": settings.SERVICE_NAME,
        "data": data
    }


class EventPublisher:
    """Publisher for sending events to RabbitMQ"""

    def __init__(self):
        self.rabbitmq_url = settings.RABBITMQ_URL
        self.exchange = settings.RABBITMQ_EXCHANGE
        self.enabled = settings.EVENTS_ENABLED

    def publish_order_created(self, order_data: Dict) -> bool:
        """
        Publish OrderCreated event to RabbitMQ

        Args:
            order_data: Order data to publish

        Returns:
            True if published successfully, False otherwise
        """
        return self._publish("OrderCreated", settings.RABBITMQ_ROUTING_KEY, order_data, mandatory=True)

    def publish_order_status_changed(self, order_data: Dict) -> bool:
        """
        Publish OrderStatusChanged event to RabbitMQ

        Args:
            order_data: Order data including old and new status

        Returns:
            True if published successfully, False otherwise
        """
        return self._publish("OrderStatusChanged", settings.RABBITMQ_STATUS_ROUTING_KEY, order_data)

    def _publish(self, event_type: str, routing_key: str, data: Dict, mandatory: bool = False) -> bool:
        if not self.enabled:
            logger.debug(f"Events disabled, {event_type} not published")
            return False

        event = build_event(event_type, data)
        try:
            self._send(event, routing_key, mandatory)
        except pika.exceptions.UnroutableError:
            logger.warning(f"Event {event_type} ({event['event_id']}) could not be routed to any queue")
            return False
        except pika.exceptions.AMQPError as e:
            logger.error(f"Error publishing {event_type} ({event['event_id']}): {e}")
            return False

        logger.info(f"Event published: {event_type} (ID: {event['event_id']})")
        return True

    @retry(
        stop=stop_after_attempt(settings.MAX_RETRIES),
        wait=wait_exponential(multiplier=settings.RETRY_DELAY, min=1, max=10),
        retry=retry_if_exception_type(pika.exceptions.AMQPConnectionError),
        reraise=True
    )
    def _send(self, event: Dict, routing_key: str, mandatory: bool) -> None:
        connection = pika.BlockingConnection(pika.URLParameters(self.rabbitmq_url))
        try:
            channel = connection.channel()
            channel.exchange_declare(
                exchange=self.exchange,
                exchange_type="topic",
                durable=True
            )

            # Publisher confirms
            channel.confirm_delivery()

            channel.basic_publish(
                exchange=self.exchange,
                routing_key=routing_key,
                body=json.dumps(event),
                properties=pika.BasicProperties(
                    delivery_mode=2,  # Persistent message
                    content_type="application/json",
                    correlation_id=event["event_id"]
                ),
                mandatory=mandatory
            )
        finally:
            connection.close()
