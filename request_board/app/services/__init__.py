"""
Service layer abstraction.

Each service encapsulates business logic for one concern so that the
API handlers stay thin: ``request_service`` owns the ordered list and
``notification_service`` announces new requests to chat.
"""
