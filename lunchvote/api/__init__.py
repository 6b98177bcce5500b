"""
API layer - Request/response DTOs for Lunch Vote.

This layer contains:
- Pydantic read models of ballot snapshots
- Pydantic models of replayable ballot scenarios

IMPORT RULES:
- CAN import from: domain, application
- CANNOT import from: infrastructure directly
"""

__all__: list[str] = []
