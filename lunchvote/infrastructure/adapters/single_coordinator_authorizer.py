"""Single-identity coordinator authorizer.

Default CoordinatorAuthorizationProtocol implementation: exactly one
identity, fixed at construction, may administer the ballot.
"""

from __future__ import annotations

from lunchvote.application.ports.coordinator_authorization import (
    CoordinatorAuthorizationProtocol,
)


class SingleCoordinatorAuthorizer(CoordinatorAuthorizationProtocol):
    """Authorizes only the identity that created the ballot.

    Attributes:
        _coordinator: The one identity allowed to administer.
    """

    def __init__(self, coordinator: str) -> None:
        if not coordinator:
            raise ValueError("coordinator must be a non-empty string")
        self._coordinator = coordinator

    @property
    def coordinator(self) -> str:
        """The authorized identity."""
        return self._coordinator

    def is_coordinator(self, caller: str) -> bool:
        return caller == self._coordinator

    def __repr__(self) -> str:
        return f"SingleCoordinatorAuthorizer(coordinator={self._coordinator!r})"
