"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate stores and implement business rules.

Usage:
    from notekeeper.backend.services.base import BaseService

    class TagService(BaseService):
        def __init__(self, store: TagStore) -> None:
            super().__init__()
            self.store = store
"""

from typing import Any

from notekeeper.backend.core.logging import get_logger


class BaseService:
    """
    Base class for all services.

    Provides:
    - Logging context
    - Common validation patterns
    """

    def __init__(self) -> None:
        self._logger = get_logger(self.__class__.__module__)

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_warning(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """Log a recoverable problem with context."""
        self._logger.warning(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
