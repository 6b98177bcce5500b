"""Base service logging mixin.

This module provides the LoggingMixin class for standardized structured
logging across application services.

Usage:
    from lunchvote.application.services.base import LoggingMixin

    class MyService(LoggingMixin):
        def __init__(self) -> None:
            self._init_logger(ballot_id="...")

        def do_something(self) -> None:
            log = self._log_operation("do_something", item_id="123")
            log.info("operation_started")
"""

import structlog


class LoggingMixin:
    """Mixin providing structured logging for services.

    The logger is bound with:
    - service: The class name of the service
    - component: The component type (default: "ballot")
    - any extra context given to _init_logger (e.g. ballot_id)

    Each operation additionally gets ``operation`` plus the context passed
    to _log_operation().

    Attributes:
        _log: The structlog BoundLogger for this service instance.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "ballot", **context: object) -> None:
        """Initialize the logger with service name binding.

        Should be called in __init__ after setting up dependencies.

        Args:
            component: The component type for log categorization.
            **context: Extra context bound for the lifetime of the service.
        """
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
            **context,
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Create operation-scoped logger.

        Args:
            operation: Name of the operation being performed.
            **context: Additional context to bind to the logger.

        Returns:
            BoundLogger with operation context.

        Example:
            log = self._log_operation("vote", caller="alice", now=12)
            log.info("vote_accepted", nomination=2)
        """
        return self._log.bind(operation=operation, **context)
