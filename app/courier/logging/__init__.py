"""Structured logging infrastructure.

Public API:
    - configure_logging(): Initialize logging for the engine
    - get_module_logger(): Get a logger for the calling module
    - bind_dispatch_context(): Context manager for dispatch-scoped logging
    - get_notification_id(): Get current notification id from context
    - clear_dispatch_context(): Clear all dispatch context

Example:
    from courier.logging import configure_logging, get_module_logger

    configure_logging(log_level="DEBUG")
    logger = get_module_logger()
    logger.info("module_initialized")
"""

from courier.logging.setup import (
    configure_logging,
    get_module_logger,
)

from courier.logging.context import (
    bind_dispatch_context,
    get_notification_id,
    clear_dispatch_context,
)

from courier.logging.formatters import (
    add_app_info,
    mask_sensitive_data,
    truncate_large_values,
    add_environment_info,
    SENSITIVE_PATTERNS,
)

__all__ = [
    # Setup
    "configure_logging",
    "get_module_logger",
    # Context
    "bind_dispatch_context",
    "get_notification_id",
    "clear_dispatch_context",
    # Formatters
    "add_app_info",
    "mask_sensitive_data",
    "truncate_large_values",
    "add_environment_info",
    "SENSITIVE_PATTERNS",
]
