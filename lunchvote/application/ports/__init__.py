"""Application ports - Abstract interfaces for infrastructure adapters.

This module defines the contracts that infrastructure adapters must implement.
Ports enable dependency inversion and make the application layer testable.

Available ports:
- CoordinatorAuthorizationProtocol: decides who may administer a ballot
"""

from lunchvote.application.ports.coordinator_authorization import (
    CoordinatorAuthorizationProtocol,
)

__all__: list[str] = ["CoordinatorAuthorizationProtocol"]
