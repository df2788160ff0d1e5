"""Operation result types and status enums.

This module contains standardized result types for channel operations,
including status enums, result dataclasses, and error classifiers for
HTTP responses and transport exceptions.
"""

from courier.operations.classifiers import (
    classify_http_status,
    classify_transport_error,
)
from courier.operations.result import OperationResult
from courier.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_http_status",
    "classify_transport_error",
]
