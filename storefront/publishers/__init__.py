"""
Publishers package
"""
from storefront.publishers.event_publisher import EventPublisher, build_event

__all__ = ["EventPublisher", "build_event"]
