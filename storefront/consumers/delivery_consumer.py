"""
RabbitMQ Consumer for OrderCreated events
"""
import pika
import json
import sys

from storefront.config import settings
from storefront.database import SessionLocal
from storefront.logger import get_logger
from storefront.services.delivery_service import DeliveryService

logger = get_logger(__name__)


def callback(ch, method, properties, body):
    """
    Callback function to process OrderCreated events

    Args:
        ch: Channel
        method: Method
        properties: Properties
        body: Message body (JSON string)
    """
    db = SessionLocal()

    try:
        event = json.loads(body)
        event_id = event.get("event_id")
        logger.info(f"Received event: {event.get('event_type')} (ID: {event_id})")

        service = DeliveryService(db)
        if service.process_order_created_event(event):
            ch.basic_ack(delivery_tag=method.delivery_tag)
            logger.info(f"Event {event_id} processed successfully")
        else:
            # Reject and don't requeue (dead-lettered if configured)
            ch.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
            logger.warning(f"Event {event_id} processing failed")

    except (json.JSONDecodeError, AttributeError) as e:
        logger.error(f"Malformed event body: {e}")
        ch.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
    except Exception as e:
        logger.exception(f"Error processing event: {e}")
        ch.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
    finally:
        db.close()


def start_consumer():
    """
    Start RabbitMQ consumer

    Binds the delivery queue to the orders exchange and consumes OrderCreated events
    """
    connection = None
    try:
        logger.info(f"Connecting to RabbitMQ exchange {settings.RABBITMQ_EXCHANGE}")
        connection = pika.BlockingConnection(
            pika.URLParameters(settings.RABBITMQ_URL)
        )
        channel = connection.channel()

        channel.exchange_declare(
            exchange=settings.RABBITMQ_EXCHANGE,
            exchange_type="topic",
            durable=True
        )
        channel.queue_declare(
            queue=settings.RABBITMQ_QUEUE,
            durable=True
        )
        channel.queue_bind(
            exchange=settings.RABBITMQ_EXCHANGE,
            queue=settings.RABBITMQ_QUEUE,
            routing_key=settings.RABBITMQ_ROUTING_KEY
        )
        logger.info(
            f"Queue {settings.RABBITMQ_QUEUE} bound with routing key {settings.RABBITMQ_ROUTING_KEY}"
        )

        channel.basic_qos(prefetch_count=10)
        channel.basic_consume(
            queue=settings.RABBITMQ_QUEUE,
            on_message_callback=callback,
            auto_ack=False  # Manual acknowledgement
        )

        logger.info(f"{settings.SERVICE_NAME} delivery consumer started, press CTRL+C to exit")
        channel.start_consuming()

    except KeyboardInterrupt:
        logger.info("Consumer stopped by user")
        if connection and connection.is_open:
            connection.close()
        sys.exit(0)
    except pika.exceptions.AMQPError as e:
        logger.error(f"Error starting consumer: {e}")
        sys.exit(1)


if __name__ == "__main__":
    start_consumer()
