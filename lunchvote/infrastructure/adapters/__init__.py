"""Infrastructure adapters for Lunch Vote.

Adapters implement the ports defined in the application layer.
"""

from lunchvote.infrastructure.adapters.single_coordinator_authorizer import (
    SingleCoordinatorAuthorizer,
)

__all__: list[str] = ["SingleCoordinatorAuthorizer"]
