"""Event Publishers"""
from .eventbridge_publisher import EventBridgePublisher

__all__ = ["EventBridgePublisher"]
