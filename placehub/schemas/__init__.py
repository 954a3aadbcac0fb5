"""
Schemas module - Request/Response schemas for API endpoints and realtime events.

Difference from stored documents:
- Documents: snake_case dicts as they live in MongoDB
- Schemas: API contract (camelCase on the wire)
"""
