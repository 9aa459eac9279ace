"""TaleemHub — dashboard personalization and push notification service."""

__version__ = "1.0.0"
