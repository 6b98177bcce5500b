"""Coordinator authorization port.

The ballot engine never compares caller identities itself. Every
coordinator-only operation asks an injected authorization predicate,
so alternate schemes (co-coordinators, delegated admins) can be
substituted without touching the state machine.

Example usage:
    class MyAuthorizer(CoordinatorAuthorizationProtocol):
        def is_coordinator(self, caller: str) -> bool:
            return caller in {"alice", "bob"}

    engine = BallotEngine("alice", authorizer=MyAuthorizer())
"""

from abc import ABC, abstractmethod


class CoordinatorAuthorizationProtocol(ABC):
    """Abstract interface for coordinator authorization."""

    @abstractmethod
    def is_coordinator(self, caller: str) -> bool:
        """Return True if ``caller`` may administer the ballot.

        Args:
            caller: Identity supplied with the call.

        Returns:
            True if the caller is authorized for coordinator-only operations.
        """
        ...
