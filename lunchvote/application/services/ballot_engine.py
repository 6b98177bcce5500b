"""Ballot engine service.

This module implements the phased venue ballot: a coordinator registers
nominations and participants during PLANNING, opens VOTING (which sets a
deadline), and the ballot closes as FINISHED either when an accepted vote
reaches quorum or when a mutating call arrives at or after the deadline.

Every mutating call is evaluated in this order, under one engine lock:
1. The supplied logical tick must not go back before the last committed tick
2. Deadline guard: an elapsed deadline closes the ballot first
3. Coordinator check (coordinator-only operations)
4. Required phase check

Usage:
    from lunchvote.application.services.ballot_engine import BallotEngine

    engine = BallotEngine("alice")
    engine.register_nomination("alice", 0, "Courtyard Cafe")
    engine.register_participant("alice", 0, "bob", "Bob")
    engine.open_voting("alice", 1)  # deadline = 1 + 280

    accepted = engine.vote("bob", 5, 1)
    engine.current_phase()  # BallotPhase.FINISHED (quorum of 1 reached)
    engine.result()  # "Courtyard Cafe"
"""

from __future__ import annotations

import functools
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar
from uuid import uuid4

from lunchvote.application.ports.coordinator_authorization import (
    CoordinatorAuthorizationProtocol,
)
from lunchvote.application.services.base import LoggingMixin
from lunchvote.config.ballot_config import DEFAULT_BALLOT_CONFIG, BallotConfig
from lunchvote.domain.errors.ballot import (
    AccessDeniedError,
    InvalidDeadlineError,
    LogicalClockRegressionError,
    PhaseViolationError,
)
from lunchvote.domain.events.ballot_finalized import (
    BallotFinalizedEvent,
    FinalizationTrigger,
)
from lunchvote.domain.models.ballot import (
    UNDECIDED_RESULT,
    Ballot,
    BallotPhase,
    BallotSnapshot,
    Nomination,
    Participant,
    quorum_for,
)
from lunchvote.domain.services.tally import tally_ballots
from lunchvote.infrastructure.adapters.single_coordinator_authorizer import (
    SingleCoordinatorAuthorizer,
)

if TYPE_CHECKING:
    from lunchvote.infrastructure.monitoring.ballot_metrics import (
        BallotMetricsCollector,
    )

_F = TypeVar("_F", bound=Callable[..., Any])

# Marks a guarded operation that raises PhaseViolationError when the deadline
# guard closes the ballot, instead of returning a fixed value
_RAISE = object()


def _guarded(
    operation: str,
    required_phase: BallotPhase,
    *,
    coordinator_only: bool = True,
    result_if_closed: Any = _RAISE,
) -> Callable[[_F], _F]:
    """Wrap a mutating engine method with the tick, deadline, role and phase gates.

    The wrapped method receives ``(self, caller, now, *args)`` and only runs
    once every gate has passed. The whole wrapper runs under the engine lock.

    Args:
        operation: Operation name reported in errors and logs.
        required_phase: Phase the operation needs.
        coordinator_only: Whether the caller must be authorized as coordinator.
        result_if_closed: Value returned, instead of raising, when this very
            call's deadline guard closed the ballot.
    """

    def decorator(method: _F) -> _F:
        @functools.wraps(method)
        def wrapper(self: BallotEngine, caller: str, now: int, *args: Any) -> Any:
            with self._lock:
                self._check_tick(now)
                closed_now = self._close_if_deadline_elapsed(now)

                if coordinator_only and not self._authorizer.is_coordinator(caller):
                    self._log_operation(operation, caller=caller, now=now).warning(
                        "access_denied"
                    )
                    raise AccessDeniedError(operation=operation, caller=caller)

                if closed_now and result_if_closed is not _RAISE:
                    return result_if_closed

                if self._phase != required_phase:
                    self._log_operation(operation, caller=caller, now=now).warning(
                        "phase_violation",
                        observed_phase=self._phase.value,
                        required_phase=required_phase.value,
                    )
                    raise PhaseViolationError(
                        operation=operation,
                        observed_phase=self._phase,
                        required_phase=required_phase,
                    )

                return method(self, caller, now, *args)

        return wrapper  # type: ignore[return-value]

    return decorator


class BallotEngine(LoggingMixin):
    """Single-round plurality ballot with quorum and deadline closing.

    One instance holds all ballot state. Callers supply their identity and
    the current logical tick with every mutating call; the engine never
    reads a clock of its own.

    Thread Safety:
    - One re-entrant lock guards every mutating call and every accessor
    - Accessors therefore observe a consistent snapshot

    Attributes:
        _coordinator: Identity that created the ballot.
        _authorizer: Predicate deciding who may administer.
        _config: Voting window and registration counting configuration.
        _metrics: Optional Prometheus collector.
        _phase: Current phase.
        _deadline: Deadline tick, None until voting opens.
        _last_tick: Tick of the latest call that changed state.
        _nominations: Number -> Nomination, in registration order.
        _participants: Identity -> Participant, in first-registration order.
        _registrations: Participant registrations performed, overwrites included.
        _ballots: Append-only ballot log.
        _result: Winning name or UNDECIDED_RESULT once finished.
        _finalization: Event recorded when the ballot closed.
    """

    def __init__(
        self,
        coordinator: str,
        *,
        authorizer: CoordinatorAuthorizationProtocol | None = None,
        config: BallotConfig | None = None,
        metrics: BallotMetricsCollector | None = None,
        ballot_id: str | None = None,
    ) -> None:
        """Initialize a ballot in the PLANNING phase.

        Args:
            coordinator: Identity creating the ballot.
            authorizer: Authorization predicate for coordinator-only
                operations. Defaults to authorizing ``coordinator`` only.
            config: Engine configuration. Uses default if not provided.
            metrics: Optional metrics collector.
            ballot_id: Identifier bound to every log line. Generated if not
                provided.
        """
        if not coordinator:
            raise ValueError("coordinator must be a non-empty string")

        self._coordinator = coordinator
        self._authorizer = authorizer or SingleCoordinatorAuthorizer(coordinator)
        self._config = config or DEFAULT_BALLOT_CONFIG
        self._metrics = metrics
        self._ballot_id = ballot_id or str(uuid4())
        self._lock = threading.RLock()

        self._phase = BallotPhase.PLANNING
        self._deadline: int | None = None
        self._last_tick: int | None = None
        self._nominations: dict[int, Nomination] = {}
        self._participants: dict[str, Participant] = {}
        self._registrations = 0
        self._ballots: list[Ballot] = []
        self._result: str | None = None
        self._finalization: BallotFinalizedEvent | None = None

        self._init_logger(component="ballot", ballot_id=self._ballot_id)
        self._log.info("ballot_created", coordinator=coordinator)

    # =========================================================================
    # Gates
    # =========================================================================

    def _check_tick(self, now: int) -> None:
        if self._last_tick is not None and now < self._last_tick:
            raise LogicalClockRegressionError(now=now, last_seen=self._last_tick)

    def _commit_tick(self, now: int) -> None:
        """Record ``now`` as the tick of the latest state change.

        Only calls that change state commit their tick; a refused call
        leaves the engine exactly as it found it.
        """
        self._last_tick = now

    def _close_if_deadline_elapsed(self, now: int) -> bool:
        """Close the ballot if the deadline has passed.

        Returns:
            True if this call closed the ballot.
        """
        if (
            self._phase == BallotPhase.VOTING
            and self._deadline is not None
            and now >= self._deadline
        ):
            self._commit_tick(now)
            self._finalize(now, FinalizationTrigger.DEADLINE)
            return True
        return False

    # =========================================================================
    # Phase transitions and tallying
    # =========================================================================

    def _transition_to(self, target: BallotPhase) -> None:
        if not self._phase.can_transition_to(target):
            raise RuntimeError(
                f"Illegal phase transition {self._phase.value} -> {target.value}"
            )
        self._phase = target
        if self._metrics is not None:
            self._metrics.record_phase_transition(target.value)

    def _participant_count(self) -> int:
        if self._config.count_reregistrations:
            return self._registrations
        return len(self._participants)

    def _finalize(self, now: int, trigger: FinalizationTrigger) -> None:
        tally = tally_ballots(self._ballots)
        if tally.winner is None:
            result = UNDECIDED_RESULT
        else:
            result = self._nominations[tally.winner].name

        participant_count = self._participant_count()
        event = BallotFinalizedEvent(
            trigger=trigger,
            closed_at=now,
            deadline=self._deadline,
            winner=tally.winner,
            result=result,
            ballot_count=tally.ballot_count,
            participant_count=participant_count,
            quorum=quorum_for(participant_count),
            tallies=dict(tally.counts),
        )

        self._result = result
        self._finalization = event
        self._transition_to(BallotPhase.FINISHED)

        if self._metrics is not None:
            self._metrics.record_finalization(trigger.value)
        self._log.info("ballot_finalized", **event.to_dict())

    # =========================================================================
    # Registration (PLANNING, coordinator)
    # =========================================================================

    @_guarded("register_nomination", BallotPhase.PLANNING)
    def register_nomination(self, caller: str, now: int, name: str) -> int:
        """Register a venue and return its nomination number.

        Args:
            caller: Identity making the call (must be coordinator).
            now: Current logical tick.
            name: Display name of the venue.

        Returns:
            The assigned number (1-based, strictly increasing).

        Raises:
            AccessDeniedError: If caller is not the coordinator.
            PhaseViolationError: If the ballot is not in PLANNING.
            ValueError: If name is empty.
        """
        number = len(self._nominations) + 1
        self._nominations[number] = Nomination(number=number, name=name)
        self._commit_tick(now)

        self._log_operation("register_nomination", now=now).info(
            "nomination_registered", number=number, name=name
        )
        return number

    @_guarded("register_participant", BallotPhase.PLANNING)
    def register_participant(
        self, caller: str, now: int, identity: str, name: str
    ) -> int:
        """Register (or re-register) a participant.

        Re-registering an identity overwrites its name and resets its
        has_voted flag.

        Args:
            caller: Identity making the call (must be coordinator).
            now: Current logical tick.
            identity: Identity the participant will vote with.
            name: Display name.

        Returns:
            The registration count: distinct identities by default, or every
            registration performed when config.count_reregistrations is set.

        Raises:
            AccessDeniedError: If caller is not the coordinator.
            PhaseViolationError: If the ballot is not in PLANNING.
            ValueError: If identity is empty.
        """
        participant = Participant(identity=identity, name=name)
        overwritten = identity in self._participants
        self._participants[identity] = participant
        self._registrations += 1
        self._commit_tick(now)

        count = self._participant_count()
        self._log_operation("register_participant", now=now).info(
            "participant_registered",
            identity=identity,
            overwritten=overwritten,
            registration_count=count,
        )
        return count

    # =========================================================================
    # Opening voting (PLANNING -> VOTING, coordinator)
    # =========================================================================

    @_guarded("open_voting", BallotPhase.PLANNING)
    def open_voting(self, caller: str, now: int) -> int:
        """Open voting and set the deadline.

        Args:
            caller: Identity making the call (must be coordinator).
            now: Current logical tick.

        Returns:
            The deadline, ``now + config.voting_window_ticks``.

        Raises:
            AccessDeniedError: If caller is not the coordinator.
            PhaseViolationError: If the ballot is not in PLANNING.
        """
        self._commit_tick(now)
        self._deadline = now + self._config.voting_window_ticks
        self._transition_to(BallotPhase.VOTING)

        log = self._log_operation("open_voting", now=now)
        if not self._nominations:
            log.warning("voting_opened_without_nominations")
        log.info(
            "voting_opened",
            deadline=self._deadline,
            nominations=len(self._nominations),
            participants=self._participant_count(),
            quorum=quorum_for(self._participant_count()),
        )
        return self._deadline

    # =========================================================================
    # Deadline adjustment (VOTING, coordinator)
    # =========================================================================

    def _apply_deadline(self, operation: str, now: int, deadline: int) -> int:
        if deadline < now:
            raise InvalidDeadlineError(
                requested_deadline=deadline,
                now=now,
                reason="deadline must not be earlier than the current tick",
            )
        previous = self._deadline
        self._deadline = deadline
        self._commit_tick(now)
        self._log_operation(operation, now=now).info(
            "deadline_adjusted", previous_deadline=previous, deadline=deadline
        )
        return deadline

    @_guarded("set_deadline", BallotPhase.VOTING)
    def set_deadline(self, caller: str, now: int, deadline: int) -> int:
        """Set the deadline to an absolute tick.

        A deadline equal to ``now`` closes the ballot on the next mutating
        call.

        Args:
            caller: Identity making the call (must be coordinator).
            now: Current logical tick.
            deadline: New deadline tick.

        Returns:
            The new deadline.

        Raises:
            AccessDeniedError: If caller is not the coordinator.
            PhaseViolationError: If the ballot is not in VOTING.
            InvalidDeadlineError: If deadline is earlier than now.
        """
        return self._apply_deadline("set_deadline", now, deadline)

    @_guarded("extend_deadline", BallotPhase.VOTING)
    def extend_deadline(self, caller: str, now: int, ticks: int) -> int:
        """Move the deadline later by ``ticks``.

        Raises:
            AccessDeniedError: If caller is not the coordinator.
            PhaseViolationError: If the ballot is not in VOTING.
            InvalidDeadlineError: If ticks is negative.
        """
        assert self._deadline is not None
        if ticks < 0:
            raise InvalidDeadlineError(
                requested_deadline=self._deadline + ticks,
                now=now,
                reason="extension must be a non-negative number of ticks",
            )
        return self._apply_deadline("extend_deadline", now, self._deadline + ticks)

    @_guarded("reduce_deadline", BallotPhase.VOTING)
    def reduce_deadline(self, caller: str, now: int, ticks: int) -> int:
        """Move the deadline earlier by ``ticks``.

        Raises:
            AccessDeniedError: If caller is not the coordinator.
            PhaseViolationError: If the ballot is not in VOTING.
            InvalidDeadlineError: If ticks is negative or the reduced
                deadline would be earlier than now.
        """
        assert self._deadline is not None
        if ticks < 0:
            raise InvalidDeadlineError(
                requested_deadline=self._deadline - ticks,
                now=now,
                reason="reduction must be a non-negative number of ticks",
            )
        return self._apply_deadline("reduce_deadline", now, self._deadline - ticks)

    # =========================================================================
    # Voting (VOTING, registered participant)
    # =========================================================================

    def _reject_vote(self, now: int, caller: str, nomination: int, reason: str) -> bool:
        if self._metrics is not None:
            self._metrics.record_vote_rejected(reason)
        self._log_operation("vote", caller=caller, now=now).info(
            "vote_rejected", nomination=nomination, reason=reason
        )
        return False

    def vote(self, caller: str, now: int, nomination_number: int) -> bool:
        """Cast the caller's single ballot.

        Eligibility problems are reported through the return value, not by
        raising.

        Args:
            caller: Identity of the voting participant.
            now: Current logical tick.
            nomination_number: Number of the nomination voted for.

        Returns:
            True if the ballot was accepted. False if the caller is not a
            participant, already voted, named an unknown nomination, or if
            this call found the deadline elapsed and closed the ballot.

        Raises:
            PhaseViolationError: If the ballot is not in VOTING (and this
                call did not itself close it).
        """
        with self._lock:
            accepted = self._vote(caller, now, nomination_number)
            if accepted is None:
                return self._reject_vote(
                    now, caller, nomination_number, "deadline_elapsed"
                )
            return accepted

    @_guarded(
        "vote",
        BallotPhase.VOTING,
        coordinator_only=False,
        result_if_closed=None,
    )
    def _vote(self, caller: str, now: int, nomination_number: int) -> bool:
        participant = self._participants.get(caller)
        if participant is None:
            return self._reject_vote(now, caller, nomination_number, "not_participant")
        if nomination_number not in self._nominations:
            return self._reject_vote(
                now, caller, nomination_number, "unknown_nomination"
            )
        if participant.has_voted:
            return self._reject_vote(now, caller, nomination_number, "already_voted")

        self._commit_tick(now)
        self._participants[caller] = participant.with_voted()
        ballot = Ballot(
            sequence=len(self._ballots) + 1,
            voter=caller,
            nomination=nomination_number,
            cast_at=now,
        )
        self._ballots.append(ballot)

        if self._metrics is not None:
            self._metrics.record_vote_accepted()
        quorum = quorum_for(self._participant_count())
        self._log_operation("vote", caller=caller, now=now).info(
            "vote_accepted",
            nomination=nomination_number,
            sequence=ballot.sequence,
            quorum=quorum,
        )

        if len(self._ballots) >= quorum:
            self._finalize(now, FinalizationTrigger.QUORUM)
        return True

    # =========================================================================
    # Read accessors
    # =========================================================================

    @property
    def coordinator(self) -> str:
        """Identity that created the ballot."""
        return self._coordinator

    @property
    def ballot_id(self) -> str:
        """Identifier bound to this ballot's log lines."""
        return self._ballot_id

    @property
    def config(self) -> BallotConfig:
        return self._config

    @property
    def deadline(self) -> int | None:
        """Current deadline tick, None before voting opens."""
        with self._lock:
            return self._deadline

    def current_phase(self) -> BallotPhase:
        """Return the current phase."""
        with self._lock:
            return self._phase

    def result(self) -> str | None:
        """Return the winning name, UNDECIDED_RESULT, or None until finished."""
        with self._lock:
            return self._result

    def winning_nomination(self) -> Nomination | None:
        """Return the winning nomination, None if unfinished or undecided."""
        with self._lock:
            if self._finalization is None or self._finalization.winner is None:
                return None
            return self._nominations[self._finalization.winner]

    def finalization(self) -> BallotFinalizedEvent | None:
        """Return the event recorded when the ballot closed, if it has."""
        with self._lock:
            return self._finalization

    def nominations(self) -> tuple[Nomination, ...]:
        with self._lock:
            return tuple(self._nominations.values())

    def participants(self) -> tuple[Participant, ...]:
        with self._lock:
            return tuple(self._participants.values())

    def ballots(self) -> tuple[Ballot, ...]:
        """Return the ballot log in append order."""
        with self._lock:
            return tuple(self._ballots)

    def participant_count(self) -> int:
        """Participant count used as the quorum divisor."""
        with self._lock:
            return self._participant_count()

    def quorum(self) -> int:
        """Accepted ballots needed to close the ballot early."""
        with self._lock:
            return quorum_for(self._participant_count())

    def tally(self) -> dict[int, int]:
        """Replay the ballot log and return the count per nomination."""
        with self._lock:
            return dict(tally_ballots(self._ballots).counts)

    def snapshot(self) -> BallotSnapshot:
        """Return a consistent copy of every entity the engine holds."""
        with self._lock:
            return BallotSnapshot(
                coordinator=self._coordinator,
                phase=self._phase,
                deadline=self._deadline,
                last_tick=self._last_tick,
                nominations=tuple(self._nominations.values()),
                participants=tuple(self._participants.values()),
                ballots=tuple(self._ballots),
                registration_count=self._participant_count(),
                result=self._result,
            )

    def __repr__(self) -> str:
        return (
            f"BallotEngine(ballot_id={self._ballot_id!r}, "
            f"phase={self._phase.value}, ballots={len(self._ballots)})"
        )
