"""structlog processors used by configure_logging().

Dispatch logs carry outbound headers, channel credentials and payload
fragments, often nested inside dicts. Masking and truncation therefore
walk nested mappings and sequences rather than only top-level keys.

Usage:
    from courier.logging.formatters import mask_sensitive_data

    processors.append(mask_sensitive_data())
"""

from typing import Any, Callable, Dict, FrozenSet, Optional

Processor = Callable[[Any, str, Dict[str, Any]], Dict[str, Any]]

# Matched as substrings of lower-cased keys
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "credential",
        "private_key",
        "signature",
    }
)

# Nesting deeper than this is rendered unchanged
MAX_DEPTH = 8


def add_app_info(app_name: str, app_version: str = "unknown") -> Processor:
    """Add ``app_name`` and ``app_version`` to every entry."""

    def processor(logger: Any, method_name: str, event_dict: Dict[str, Any]):
        event_dict.setdefault("app_name", app_name)
        event_dict.setdefault("app_version", app_version)
        return event_dict

    return processor


def add_environment_info(environment: str) -> Processor:
    """Add ``environment`` to every entry."""

    def processor(logger: Any, method_name: str, event_dict: Dict[str, Any]):
        event_dict.setdefault("environment", environment)
        return event_dict

    return processor


def mask_sensitive_data(
    mask_value: str = "***REDACTED***",
    additional_patterns: Optional[FrozenSet[str]] = None,
) -> Processor:
    """Mask values whose key contains a sensitive pattern.

    Keys are compared case-insensitively at every nesting level, so an
    ``Authorization`` header inside a logged ``headers`` dict is masked as
    well as a top-level ``webhook_secret``. None values are left as None
    so logs still show that a credential was absent.

    Args:
        mask_value: Replacement for sensitive values
        additional_patterns: Extra key substrings to treat as sensitive
    """
    patterns = SENSITIVE_PATTERNS | (additional_patterns or frozenset())

    def is_sensitive(key: Any) -> bool:
        lowered = str(key).lower()
        return any(pattern in lowered for pattern in patterns)

    def mask(value: Any, depth: int) -> Any:
        if depth > MAX_DEPTH:
            return value
        if isinstance(value, dict):
            return {
                k: mask_value if is_sensitive(k) and v is not None else mask(v, depth + 1)
                for k, v in value.items()
            }
        if type(value) in (list, tuple):
            return type(value)(mask(item, depth + 1) for item in value)
        return value

    def processor(logger: Any, method_name: str, event_dict: Dict[str, Any]):
        return mask(event_dict, 0)

    return processor


def truncate_large_values(max_length: int = 500) -> Processor:
    """Shorten strings longer than ``max_length``, at any nesting level."""

    def truncate(value: Any, depth: int) -> Any:
        if isinstance(value, str) and len(value) > max_length:
            return value[:max_length] + f"...[truncated, {len(value)} chars total]"
        if depth > MAX_DEPTH:
            return value
        if isinstance(value, dict):
            return {k: truncate(v, depth + 1) for k, v in value.items()}
        if type(value) in (list, tuple):
            return type(value)(truncate(item, depth + 1) for item in value)
        return value

    def processor(logger: Any, method_name: str, event_dict: Dict[str, Any]):
        return truncate(event_dict, 0)

    return processor
