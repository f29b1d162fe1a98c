"""
Pydantic schema definitions for API payloads.

Schemas are separated from the storage layer to decouple the API
representation from the SQLite columns.  The client package reuses
``request.RequestRead`` to parse list responses.
"""
