"""
Publishers package
"""
from orderdesk.publishers.event_publisher import EventPublisher

__all__ = ["EventPublisher"]
