"""
Base Service Class for RiskCast
Provides common functionality for all services
"""

from abc import ABC
from typing import Optional, Dict, Any, NoReturn
import structlog
from datetime import datetime, timezone

from config import Settings, settings as default_settings


class BaseService(ABC):
    """Base class for all services with common functionality"""

    def __init__(self, config: Optional[Settings] = None):
        """
        Initialize base service

        Args:
            config: Settings instance (module-level settings when omitted)
        """
        self.config = config or default_settings
        self.logger = structlog.get_logger(self.__class__.__name__)

    def _handle_error(self, error: Exception, context: Dict[str, Any]) -> NoReturn:
        """
        Log a failed operation with its context, then re-raise

        Args:
            error: The exception that occurred
            context: Additional context for logging
        """
        self.logger.error(
            f"{self.__class__.__name__} error",
            error=str(error),
            error_type=type(error).__name__,
            timestamp=datetime.now(timezone.utc).isoformat(),
            **context
        )
        raise error

    def _log_operation(
        self,
        operation: str,
        details: Dict[str, Any],
        level: str = "info"
    ):
        """
        Log service operation with consistent format

        Args:
            operation: Name of the operation
            details: Operation details
            level: Log level (info, warning, error)
        """
        log_func = getattr(self.logger, level, self.logger.info)
        log_func(
            f"{self.__class__.__name__}.{operation}",
            **details
        )
